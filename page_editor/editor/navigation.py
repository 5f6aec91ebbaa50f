"""
Pile de navigation (fil d'Ariane) : sélection d'une racine + drill-down.

Chaque frame porte son chemin, son libellé et sa config (SectionConfig,
ObjectField ou ArrayField). Le chemin d'une frame prolonge strictement celui
de la précédente.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from ..core.errors import ConfigNotFound
from ..core.path import Path, PathLike, get_in
from ..core.schemas import (
    ArrayField,
    BuilderConfig,
    ObjectField,
    PageSchema,
    SectionConfig,
    merged_global_sections,
)

log = logging.getLogger(__name__)

FrameConfig = Union[SectionConfig, ObjectField, ArrayField]


@dataclass(frozen=True)
class Breadcrumb:
    path: Path
    label: str
    config: Any

    @property
    def is_repeater(self) -> bool:
        return isinstance(self.config, ArrayField)


def item_label(item: Any, fallback: Optional[str], index: Optional[int]) -> str:
    """Libellé d'un item : label > title > fallback > « Élément #n »."""
    if isinstance(item, dict):
        for key in ("label", "title"):
            if item.get(key):
                return str(item[key])
    if fallback:
        return fallback
    return f"Élément #{index + 1}" if index is not None else "Élément"


class NavigationStack:
    """
    Fil d'Ariane de l'éditeur.

    Usage:
        >>> nav = NavigationStack(schema, config)
        >>> nav.select(tree, "page.blocks.0.data")
        >>> nav.drill_down(tree, "items", items_field)
        >>> nav.go_back(0)
    """

    def __init__(self, schema: PageSchema, config: Optional[BuilderConfig] = None):
        self.schema = schema
        self.config = config or BuilderConfig()
        self._frames: List[Breadcrumb] = []

    # ── Lecture ──────────────────────────────────────────────────────────────

    @property
    def frames(self) -> List[Breadcrumb]:
        return list(self._frames)

    @property
    def current(self) -> Optional[Breadcrumb]:
        return self._frames[-1] if self._frames else None

    @property
    def root(self) -> Optional[Breadcrumb]:
        return self._frames[0] if self._frames else None

    def labels(self) -> List[str]:
        return [f.label for f in self._frames]

    def __len__(self) -> int:
        return len(self._frames)

    def __bool__(self) -> bool:
        return bool(self._frames)

    # ── Sélection de la racine ───────────────────────────────────────────────

    def resolve_root_config(self, tree: Any, path: PathLike) -> Optional[FrameConfig]:
        """
        Classe le chemin dans une des trois catégories racines :
          page.blocks.<i>...  → schema.blocks[type du bloc i]
          page.<champ>...     → entrée de page_fields portant ce nom
          globals.<clé>...    → sections globales (schéma + config)
        """
        p = Path(path)
        if len(p) >= 3 and p[0] == "page" and p[1] == "blocks" and isinstance(p[2], int):
            block_type = get_in(tree, ("page", "blocks", p[2], "type"))
            return self.schema.blocks.get(block_type) if isinstance(block_type, str) else None
        if len(p) >= 2 and p[0] == "page" and isinstance(p[1], str):
            return self.schema.page_field(p[1])
        if len(p) >= 2 and p[0] == "globals" and isinstance(p[1], str):
            return merged_global_sections(self.schema, self.config).get(p[1])
        return None

    def select(self, tree: Any, path: PathLike, strict: bool = False) -> Optional[Breadcrumb]:
        """
        Remplace la pile par la frame racine du chemin.
        Aucune config : pile vide, None (ou ConfigNotFound si strict).
        """
        p = Path(path)
        config = self.resolve_root_config(tree, p)
        if config is None:
            log.warning("Configuration introuvable pour %s", p)
            self._frames = []
            if strict:
                raise ConfigNotFound(f"Configuration introuvable pour {p}")
            return None
        root = Breadcrumb(path=p, label=config.label, config=config)
        self._frames = [root]
        return root

    # ── Drill-down / retour ──────────────────────────────────────────────────

    def drill_down(
        self,
        tree: Any,
        field_name: str,
        child_config: FrameConfig,
        index: Optional[int] = None,
    ) -> Optional[Breadcrumb]:
        """
        Entre dans un champ (objet/répéteur) ou un item de répéteur.
        Item hors de la liste courante → warning, pile inchangée, None.
        """
        top = self.current
        if top is None:
            raise ValueError("drill_down sans frame racine")
        new_path = top.path.child(field_name)
        if index is not None:
            new_path = new_path.item(index)
        if not top.path.is_strict_prefix_of(new_path):
            raise ValueError(f"drill_down doit prolonger le chemin courant ({top.path})")

        item = None
        if index is not None:
            items = get_in(tree, top.path.child(field_name))
            if not isinstance(items, list) or not 0 <= index < len(items):
                log.warning("drill_down : pas d'item %s sous %s", index, top.path.child(field_name))
                return None
            item = items[index]
        label = item_label(item, getattr(child_config, "label", None), index)
        frame = Breadcrumb(path=new_path, label=label, config=child_config)
        self._frames.append(frame)
        return frame

    def go_back(self, n: int) -> None:
        """Garde les frames 0..n. Index invalide → no-op."""
        if 0 <= n < len(self._frames):
            del self._frames[n + 1:]

    def clear(self) -> None:
        self._frames = []
