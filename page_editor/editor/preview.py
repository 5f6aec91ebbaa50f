"""
Aperçu éditable : rendu des blocs par l'hôte + affordances d'édition autour.

Le BlockRenderer est pur (aucun retour vers l'arbre) ; la sélection passe par
le chemin porté par chaque EditableBlock.
"""
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, runtime_checkable

from ..core.path import Path, get_in

GLOBAL_SECTIONS = ("header", "footer")


@runtime_checkable
class BlockRenderer(Protocol):
    def render(self, block: dict) -> Any: ...


@dataclass
class EditableBlock:
    index: int
    id: Optional[str]
    type: Optional[str]
    path: Path
    view: Any


@dataclass
class EditableSection:
    key: str
    path: Path
    data: dict


def editable_blocks(tree: Any, renderer: BlockRenderer) -> List[EditableBlock]:
    """Rend chaque bloc de page ; path = page.blocks.<i>.data (cible de select_block)."""
    blocks = get_in(tree, "page.blocks", [])
    return [
        EditableBlock(
            index=i,
            id=block.get("id"),
            type=block.get("type"),
            path=Path(("page", "blocks", i, "data")),
            view=renderer.render(block),
        )
        for i, block in enumerate(blocks if isinstance(blocks, list) else [])
        if isinstance(block, dict)
    ]


def editable_globals(tree: Any, keys=GLOBAL_SECTIONS) -> List[EditableSection]:
    """Sections globales présentes dans l'arbre (header / footer par défaut)."""
    sections = []
    for key in keys:
        data = get_in(tree, ("globals", key))
        if isinstance(data, dict):
            sections.append(EditableSection(key=key, path=Path(("globals", key)), data=data))
    return sections
