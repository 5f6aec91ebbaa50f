"""
Navigateur de collection : liste paginée triée par date + fiche d'une entrée.

Les colonnes viennent du schéma de la collection (SectionConfig.fields) ;
la fiche sépare les champs déclarés des clés brutes absentes du schéma.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..core.errors import ContentValidationError, NetworkError, NotFound
from ..core.schemas import SectionConfig
from ..services.base import ContentStore, Notifier, call_collaborator

log = logging.getLogger(__name__)

_STORE_ERRORS = (NetworkError, ContentValidationError, NotFound)
SORT_ORDERS = ("desc", "asc")


@dataclass
class EntryCell:
    name: str
    label: str
    type: str
    value: Any = None


@dataclass
class EntryRow:
    id: str
    cells: List[EntryCell] = field(default_factory=list)


@dataclass
class EntryPage:
    rows: List[EntryRow]
    current_page: int
    total_pages: int
    total_entries: int
    sort_order: str

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


@dataclass
class EntryDetail:
    id: str
    fields: List[EntryCell] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)


class CollectionBrowser:
    """
    Consultation d'une collection (lecture seule).

    Usage:
        >>> browser = CollectionBrowser(store, "contacts", schema)
        >>> page = await browser.page()
        >>> browser.toggle_sort()            # desc ↔ asc, retour page 1
        >>> detail = await browser.detail(page.rows[0].id)
    """

    def __init__(
        self,
        store: ContentStore,
        collection: str,
        schema: Union[SectionConfig, dict],
        notifier: Optional[Notifier] = None,
        limit: int = 10,
    ):
        self.store = store
        self.collection = collection
        self.schema = schema if isinstance(schema, SectionConfig) else SectionConfig.model_validate(schema)
        self.notifier = notifier or Notifier()
        self.limit = limit
        self.page_number = 1
        self.sort_order = "desc"

    def _cells(self, entry: Dict[str, Any]) -> List[EntryCell]:
        return [EntryCell(f.name, f.label, f.type, entry.get(f.name)) for f in self.schema.fields]

    # ── Liste ────────────────────────────────────────────────────────────────

    async def page(self, number: Optional[int] = None) -> Optional[EntryPage]:
        """Charge une page (la page courante par défaut). Échec → notification, None."""
        number = self.page_number if number is None else number
        try:
            body = await call_collaborator(
                self.store.list_entries, self.collection,
                page=number, limit=self.limit, sort_order=self.sort_order,
            )
            entries = body.get("entries") if isinstance(body, dict) else None
            if not isinstance(entries, list):
                raise ContentValidationError("Réponse de collection sans `entries`")
        except _STORE_ERRORS as e:
            log.error("Collection %s (page %s) indisponible : %s", self.collection, number, e)
            self.notifier.show("Impossible de charger les données de la collection.", "error")
            return None

        pagination = body.get("pagination") or {}
        self.page_number = number
        return EntryPage(
            rows=[EntryRow(str(e.get("id")), self._cells(e)) for e in entries if isinstance(e, dict)],
            current_page=pagination.get("currentPage", number),
            total_pages=pagination.get("totalPages", 1),
            total_entries=pagination.get("totalEntries", len(entries)),
            sort_order=self.sort_order,
        )

    async def next_page(self) -> Optional[EntryPage]:
        return await self.page(self.page_number + 1)

    async def previous_page(self) -> Optional[EntryPage]:
        return await self.page(max(1, self.page_number - 1))

    def toggle_sort(self) -> str:
        self.sort_order = "asc" if self.sort_order == "desc" else "desc"
        self.page_number = 1
        return self.sort_order

    # ── Fiche ────────────────────────────────────────────────────────────────

    async def detail(self, entry_id: str) -> Optional[EntryDetail]:
        """Champs du schéma dans l'ordre déclaré + clés non déclarées (hors `id`)."""
        try:
            entry = await call_collaborator(self.store.get_entry, self.collection, entry_id)
            if not isinstance(entry, dict):
                raise ContentValidationError("Entrée de collection invalide")
        except _STORE_ERRORS as e:
            log.error("Entrée %s/%s indisponible : %s", self.collection, entry_id, e)
            self.notifier.show("Impossible de charger cette entrée.", "error")
            return None

        declared = {f.name for f in self.schema.fields}
        return EntryDetail(
            id=str(entry.get("id", entry_id)),
            fields=self._cells(entry),
            extra={k: v for k, v in entry.items() if k not in declared and k != "id"},
        )
