"""
Session d'édition : arbre de travail, baseline, panneaux, sauvegarde.

Flux :
  sélection → NavigationStack.select() → FieldDispatcher.render()
  édition   → update(chemin, valeur) → set_in() → nouvel arbre
  save()    → store.save() → baseline := arbre sauvegardé

Un seul écrivain (la session), mutations synchrones ; les seuls points de
suspension sont les appels aux collaborateurs et la confirmation.
"""
import copy
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from ..core.errors import ContentValidationError, NetworkError, NotFound
from ..core.path import PathLike, deep_equal, set_in
from ..core.schemas import (
    BuilderConfig,
    PageSchema,
    SectionConfig,
    empty_tree,
    merged_global_sections,
    parse_load_response,
    validate_tree,
)
from ..services.base import (
    CANCELLED,
    AssetStore,
    Confirm,
    ConfirmOptions,
    ContentGroup,
    ContentStore,
    Notifier,
    UploadFile,
    ask,
    call_collaborator,
)
from .fields import FieldDispatcher, FieldsView, RepeaterView
from .navigation import Breadcrumb, FrameConfig, NavigationStack
from .structure import StructuralEditor

log = logging.getLogger(__name__)


class Panel(str, Enum):
    IDLE      = "idle"
    EDITING   = "editing"
    STRUCTURE = "structure"


async def _deny(options: ConfirmOptions) -> Any:
    return CANCELLED


class EditorSession:
    """
    Session d'édition d'une page.

    Args:
        pathname: chemin public de la page (clé du store)
        tree: arbre de contenu chargé ({page: {blocks}, globals})
        schema: PageSchema (ou dict équivalent)
        store: ContentStore utilisé par save() / reload()
        config: BuilderConfig (sections globales externes, content_types)
        confirm: collaborateur de confirmation (sans lui, tout est annulé)
        assets: AssetStore pour les champs image
        notifier: notifications transitoires
    """

    def __init__(
        self,
        pathname: str,
        tree: dict,
        schema: Union[PageSchema, dict],
        store: Optional[ContentStore] = None,
        *,
        config: Optional[BuilderConfig] = None,
        confirm: Optional[Confirm] = None,
        assets: Optional[AssetStore] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.pathname = pathname
        self.schema = schema if isinstance(schema, PageSchema) else PageSchema.model_validate(schema)
        self.config = config or BuilderConfig()
        self.store = store
        self.assets = assets
        self.confirm = confirm or _deny
        self.notifier = notifier or Notifier()

        self.baseline: dict = copy.deepcopy(validate_tree(tree))
        self.working: dict = self.baseline
        self.is_saving = False
        self.panel = Panel.IDLE

        self.navigation = NavigationStack(self.schema, self.config)
        self.dispatcher = FieldDispatcher(self.update, self.drill_down, self.config)
        self.structure = StructuralEditor(self)

    @classmethod
    async def open(
        cls,
        pathname: str,
        store: ContentStore,
        *,
        create_missing: bool = False,
        schema: Optional[Union[PageSchema, dict]] = None,
        **kwargs,
    ) -> "EditorSession":
        """
        Charge la page depuis le store. NotFound / NetworkError remontent à l'hôte,
        sauf NotFound avec create_missing=True : session vide sur `schema`.
        """
        try:
            payload = await call_collaborator(store.load, pathname)
        except NotFound:
            if not create_missing:
                raise
            log.info("Contenu %s absent : session vide", pathname)
            return cls(pathname, empty_tree(), schema or PageSchema(), store, **kwargs)
        tree, loaded = parse_load_response(payload)
        return cls(pathname, tree, loaded, store, **kwargs)

    # ── Arbre ────────────────────────────────────────────────────────────────

    @property
    def is_dirty(self) -> bool:
        return not deep_equal(self.baseline, self.working)

    def update(self, path: PathLike, value: Any) -> None:
        """Seul point d'écriture : remplace l'arbre de travail par set_in(...)."""
        self.working = set_in(self.working, path, value)
        log.debug("update %s", path)

    # ── Sauvegarde ───────────────────────────────────────────────────────────

    async def save(self) -> bool:
        """
        Sauvegarde single-flight.
        Un appel pendant une sauvegarde en cours est ignoré (pas de file d'attente).
        Échec : arbre de travail et état dirty inchangés, notification d'erreur.
        """
        if self.is_saving:
            log.info("Sauvegarde déjà en cours : appel ignoré")
            return False
        if self.store is None:
            raise RuntimeError("Aucun ContentStore configuré pour cette session")

        self.is_saving = True
        snapshot = self.working
        try:
            result = await call_collaborator(self.store.save, self.pathname, snapshot)
        except (NetworkError, ContentValidationError, NotFound) as e:
            log.error("Échec de sauvegarde de %s : %s", self.pathname, e)
            self.notifier.show(str(e) or "Une erreur est survenue lors de la sauvegarde.", "error")
            return False
        finally:
            self.is_saving = False

        self.baseline = snapshot
        message = result.get("message") if isinstance(result, dict) else None
        self.notifier.show(message or "Sauvegarde réussie !", "success")
        return True

    async def reload(self) -> bool:
        """
        Recharge l'arbre depuis le store (réconciliation après sauvegarde).
        Échec : arbres et schéma inchangés, notification d'erreur, False.
        """
        if self.store is None:
            raise RuntimeError("Aucun ContentStore configuré pour cette session")
        try:
            payload = await call_collaborator(self.store.load, self.pathname)
            tree, schema = parse_load_response(payload)
        except (NetworkError, ContentValidationError, NotFound) as e:
            log.error("Échec du rechargement de %s : %s", self.pathname, e)
            self.notifier.show("Impossible de recharger le contenu.", "error")
            return False
        self.schema = schema
        self.navigation = NavigationStack(self.schema, self.config)
        self.baseline = copy.deepcopy(tree)
        self.working = self.baseline
        self.panel = Panel.IDLE
        return True

    # ── Panneaux ─────────────────────────────────────────────────────────────

    def select_block(self, index: int) -> Optional[Breadcrumb]:
        return self._open_editing(f"page.blocks.{index}.data")

    def select_section(self, key_or_path: str) -> Optional[Breadcrumb]:
        """Clé seule → section globale ; chemin avec un point → pris tel quel."""
        path = key_or_path if "." in key_or_path else f"globals.{key_or_path}"
        return self._open_editing(path)

    def _open_editing(self, path: PathLike) -> Optional[Breadcrumb]:
        root = self.navigation.select(self.working, path)
        if root is None:
            self.notifier.show("Configuration introuvable pour cette section.", "error")
            if self.panel is Panel.EDITING:
                self.panel = Panel.IDLE
            return None
        self.panel = Panel.EDITING
        return root

    def close_editing(self) -> None:
        self.navigation.clear()
        if self.panel is Panel.EDITING:
            self.panel = Panel.IDLE

    def toggle_structure(self) -> Panel:
        if self.panel is Panel.STRUCTURE:
            self.panel = Panel.IDLE
        else:
            self.navigation.clear()
            self.panel = Panel.STRUCTURE
        return self.panel

    def close_structure(self) -> None:
        if self.panel is Panel.STRUCTURE:
            self.panel = Panel.IDLE

    # ── Navigation ───────────────────────────────────────────────────────────

    def drill_down(self, field_name: str, config: FrameConfig, index: Optional[int] = None) -> Optional[Breadcrumb]:
        return self.navigation.drill_down(self.working, field_name, config, index)

    def go_back(self, n: int) -> None:
        self.navigation.go_back(n)

    def current_view(self) -> Optional[Union[FieldsView, RepeaterView]]:
        frame = self.navigation.current
        if frame is None:
            return None
        return self.dispatcher.render(frame, self.working)

    # ── Collaborateurs ───────────────────────────────────────────────────────

    async def ask(self, options: ConfirmOptions) -> Any:
        return await ask(self.confirm, options)

    async def upload_asset(self, path: PathLike, file: UploadFile) -> Optional[str]:
        """Upload d'un fichier puis écriture de son chemin public au chemin donné."""
        if self.assets is None:
            self.notifier.show("Aucun service d'upload configuré.", "error")
            return None
        try:
            result = await call_collaborator(self.assets.upload, file)
            file_path = result.get("filePath") if isinstance(result, dict) else None
            if not file_path:
                raise ContentValidationError("Réponse d'upload sans `filePath`")
        except (NetworkError, ContentValidationError) as e:
            log.error("Upload échoué : %s", e)
            self.notifier.show("Erreur lors de l'upload de l'image.", "error")
            return None
        self.update(path, file_path)
        return file_path

    async def link_targets(self) -> List[ContentGroup]:
        """Pages et contenus proposés par les champs lien."""
        if self.store is None:
            return []
        try:
            groups = await call_collaborator(self.store.list)
            return [ContentGroup.model_validate(g) for g in groups]
        except (NetworkError, ContentValidationError, ValidationError) as e:
            log.error("Impossible de charger la liste des pages : %s", e)
            self.notifier.show("Impossible de charger le contenu", "error")
            return []

    def block_types(self) -> List[Tuple[str, str]]:
        """Types de blocs proposés à l'ajout : [(type, libellé)]."""
        return [(key, section.label or key) for key, section in self.schema.blocks.items()]

    def global_sections(self) -> Dict[str, SectionConfig]:
        return merged_global_sections(self.schema, self.config)
