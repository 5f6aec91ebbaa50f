"""
Gestion des contenus du site : lister, créer, supprimer des pages / articles.

Chaque création demande un nom (confirmation avec saisie), chaque suppression
une confirmation simple. Les échecs du store deviennent des notifications.
"""
import logging
from typing import List, Optional

from pydantic import ValidationError

from ..core.errors import ContentValidationError, NetworkError, NotFound
from ..services.base import (
    CANCELLED,
    Confirm,
    ConfirmOptions,
    ContentGroup,
    ContentStore,
    Notifier,
    PromptOptions,
    ask,
    call_collaborator,
)

log = logging.getLogger(__name__)

HOME_PATH = "/"
_STORE_ERRORS = (NetworkError, ContentValidationError, NotFound)


class ContentManager:
    """
    Panneau de gestion du site.

    Usage:
        >>> manager = ContentManager(store, confirm, notifier, current_path="/blog/hello")
        >>> groups = await manager.groups()
        >>> path = await manager.create("articles", "Articles")
        >>> await manager.delete("/blog/hello")
    """

    def __init__(
        self,
        store: ContentStore,
        confirm: Confirm,
        notifier: Optional[Notifier] = None,
        current_path: str = HOME_PATH,
    ):
        self.store = store
        self.confirm = confirm
        self.notifier = notifier or Notifier()
        self.current_path = current_path

    async def groups(self, prefix: str = "") -> List[ContentGroup]:
        """Groupes de contenus ; `prefix` (ex: "/admin") est ajouté aux chemins."""
        try:
            raw = await call_collaborator(self.store.list)
            groups = [ContentGroup.model_validate(g) for g in raw]
        except _STORE_ERRORS + (ValidationError,) as e:
            log.error("Liste des contenus indisponible : %s", e)
            self.notifier.show("Impossible de charger la liste du contenu.", "error")
            return []
        if prefix:
            for group in groups:
                for item in group.items:
                    item.path = prefix + item.path
        return groups

    async def create(self, type_id: str, type_label: str) -> Optional[str]:
        """Demande un nom puis crée le contenu. Renvoie son chemin, None si annulé/échec."""
        singular = type_label[:-1] if type_label.endswith("s") else type_label
        name = await ask(self.confirm, ConfirmOptions(
            title=f"Créer un(e) nouveau/nouvelle {singular}",
            message="Veuillez entrer un nom pour ce nouveau contenu. Ce nom sera utilisé pour générer l'URL.",
            confirm_text="Créer",
            prompt=PromptOptions(label="Nom du contenu", placeholder="Ex: Mon premier article"),
        ))
        if name is CANCELLED:
            return None
        if not str(name).strip():
            self.notifier.show("Le nom du contenu est obligatoire.", "error")
            return None

        try:
            result = await call_collaborator(self.store.create, str(name).strip(), type_id)
            path = result.get("path") if isinstance(result, dict) else None
            if not path:
                raise ContentValidationError("Réponse de création sans `path`")
        except _STORE_ERRORS as e:
            log.error("Création de %r (%s) échouée : %s", name, type_id, e)
            self.notifier.show(str(e), "error")
            return None
        self.notifier.show(result.get("message") or f"Contenu créé : {path}", "success")
        return path

    async def delete(self, pathname: str) -> bool:
        """Supprime un contenu après confirmation. La page d'accueil ne se supprime pas."""
        if pathname == HOME_PATH:
            self.notifier.show("La page d'accueil ne peut pas être supprimée.", "error")
            return False
        answer = await ask(self.confirm, ConfirmOptions(
            title="Confirmer la suppression",
            message="Êtes-vous sûr de vouloir supprimer ce contenu ? Cette action est irréversible.",
            confirm_text="Supprimer",
        ))
        if answer is CANCELLED:
            return False

        try:
            result = await call_collaborator(self.store.delete, pathname)
        except _STORE_ERRORS as e:
            log.error("Suppression de %s échouée : %s", pathname, e)
            self.notifier.show(str(e), "error")
            return False
        message = result.get("message") if isinstance(result, dict) else None
        self.notifier.show(message or f"Contenu supprimé : {pathname}", "success")
        return True

