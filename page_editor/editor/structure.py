"""
Éditeur structurel : ajout / suppression / réordonnancement de séquences à `id`.

Deux profondeurs :
  - page.blocks                 → blocs de page (suppression confirmée)
  - <chemin d'un champ array>   → items de répéteur (suppression immédiate)

Les fonctions de ce module sont pures ; StructuralEditor écrit via
session.update(), comme n'importe quelle édition de champ.
"""
import copy
import logging
import uuid
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from ..core.path import Path, PathLike, get_in
from ..core.schemas import ArrayField, SectionConfig
from ..services.base import CANCELLED, ConfirmOptions

if TYPE_CHECKING:
    from .session import EditorSession

log = logging.getLogger(__name__)

BLOCKS_PATH = Path("page.blocks")


# ── Fonctions pures ─────────────────────────────────────────────────────────

def _check_index(items: List[Any], index: int) -> None:
    if not 0 <= index < len(items):
        raise IndexError(f"Index {index} hors limites (0..{len(items) - 1})")


def array_move(items: List[Any], old_index: int, new_index: int) -> List[Any]:
    """Déplace l'élément old_index vers new_index (retrait puis insertion)."""
    _check_index(items, old_index)
    _check_index(items, new_index)
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved


def remove_at(items: List[Any], index: int) -> List[Any]:
    """Retire l'élément `index`, l'ordre relatif des autres est conservé."""
    _check_index(items, index)
    return items[:index] + items[index + 1:]


def index_of(items: Iterable[Any], item_id: Any) -> Optional[int]:
    for i, item in enumerate(items):
        if isinstance(item, dict) and item.get("id") == item_id:
            return i
    return None


def fresh_id(prefix: str, siblings: Iterable[Any] = ()) -> str:
    """Identifiant `<prefix>-xxxxxxxx` absent des frères."""
    taken = {s.get("id") for s in siblings if isinstance(s, dict)}
    while True:
        candidate = f"{prefix}-{uuid.uuid4().hex[:8]}"
        if candidate not in taken:
            return candidate


def new_block(block_type: str, section: SectionConfig, siblings: Iterable[Any] = ()) -> dict:
    """Nouveau bloc : data = copie profonde de defaultData (jamais partagée avec le schéma)."""
    return {
        "id": fresh_id("block", siblings),
        "type": block_type,
        "data": copy.deepcopy(section.default_data or {}),
    }


def new_item(config: ArrayField, siblings: Iterable[Any] = ()) -> dict:
    """Nouvel item de répéteur, pré-rempli avec les defaultData de ses champs."""
    item = {"id": fresh_id("item", siblings)}
    for f in config.item_fields.values():
        if f.default_data is not None:
            item[f.name] = copy.deepcopy(f.default_data)
    return item


# ── Éditeur ─────────────────────────────────────────────────────────────────

class StructuralEditor:
    """
    Opérations structurelles sur l'arbre de travail d'une session.

    Usage:
        >>> editor = StructuralEditor(session)
        >>> editor.add_block("hero")
        >>> await editor.delete_block(0)       # demande confirmation
        >>> editor.move_block("block-a", "block-c")
    """

    def __init__(self, session: "EditorSession"):
        self.session = session

    def _items(self, container_path: PathLike) -> List[Any]:
        items = get_in(self.session.working, container_path)
        return list(items) if isinstance(items, list) else []

    # ── Générique ────────────────────────────────────────────────────────────

    def add(self, container_path: PathLike, item: Any) -> None:
        self.session.update(container_path, self._items(container_path) + [item])

    def delete(self, container_path: PathLike, index: int) -> bool:
        items = self._items(container_path)
        try:
            remaining = remove_at(items, index)
        except IndexError as e:
            log.warning("Suppression ignorée (%s) : %s", Path(container_path), e)
            return False
        self.session.update(container_path, remaining)
        return True

    def reorder(self, container_path: PathLike, old_index: int, new_index: int) -> bool:
        items = self._items(container_path)
        try:
            moved = array_move(items, old_index, new_index)
        except IndexError as e:
            log.warning("Réordonnancement ignoré (%s) : %s", Path(container_path), e)
            return False
        self.session.update(container_path, moved)
        return True

    def move_by_id(self, container_path: PathLike, active_id: Any, over_id: Any) -> bool:
        """Fin de drag : résout les ids en index courants puis réordonne."""
        if active_id == over_id:
            return False
        items = self._items(container_path)
        old_index, new_index = index_of(items, active_id), index_of(items, over_id)
        if old_index is None or new_index is None:
            log.warning("Drag ignoré : id inconnu (%s → %s)", active_id, over_id)
            return False
        return self.reorder(container_path, old_index, new_index)

    # ── Blocs de page ────────────────────────────────────────────────────────

    def add_block(self, block_type: str) -> Optional[dict]:
        section = self.session.schema.blocks.get(block_type)
        if section is None:
            log.warning("Type de bloc inconnu : %s", block_type)
            self.session.notifier.show(f"Type de bloc inconnu: {block_type}", "error")
            return None
        block = new_block(block_type, section, self._items(BLOCKS_PATH))
        self.add(BLOCKS_PATH, block)
        return block

    async def delete_block(self, index: int) -> bool:
        """
        Supprime un bloc après confirmation.
        L'id est capturé avant la question puis re-résolu : les éditions faites
        pendant l'attente sont conservées.
        """
        blocks = self._items(BLOCKS_PATH)
        if not 0 <= index < len(blocks):
            log.warning("Suppression de bloc ignorée : index %s hors limites", index)
            return False
        block_id = blocks[index].get("id") if isinstance(blocks[index], dict) else None

        answer = await self.session.ask(ConfirmOptions(
            title="Confirmer la suppression",
            message="Êtes-vous sûr de vouloir supprimer ce bloc ? Cette action est irréversible.",
            confirm_text="Supprimer",
            cancel_text="Annuler",
        ))
        if answer is CANCELLED:
            return False

        current = index_of(self._items(BLOCKS_PATH), block_id)
        if current is None:
            return False
        return self.delete(BLOCKS_PATH, current)

    def reorder_blocks(self, old_index: int, new_index: int) -> bool:
        return self.reorder(BLOCKS_PATH, old_index, new_index)

    def move_block(self, active_id: str, over_id: str) -> bool:
        return self.move_by_id(BLOCKS_PATH, active_id, over_id)

    # ── Répéteurs ────────────────────────────────────────────────────────────

    def add_item(self, container_path: PathLike, config: ArrayField) -> dict:
        item = new_item(config, self._items(container_path))
        self.add(container_path, item)
        return item

    def delete_item(self, container_path: PathLike, index: int) -> bool:
        # pas de confirmation pour les items de répéteur
        return self.delete(container_path, index)

    def reorder_items(self, container_path: PathLike, old_index: int, new_index: int) -> bool:
        return self.reorder(container_path, old_index, new_index)

    def move_item(self, container_path: PathLike, active_id: Any, over_id: Any) -> bool:
        return self.move_by_id(container_path, active_id, over_id)
