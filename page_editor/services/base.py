"""
Contrats des collaborateurs externes de l'éditeur.

ContentStore : load / save / list / create / delete (+ list_entries / get_entry)
AssetStore   : upload
Confirm      : question oui/non (avec saisie optionnelle) → str | CANCELLED
Notifier     : notification transitoire, fermable
"""
import asyncio
import inspect
import logging
from typing import Any, BinaryIO, Dict, List, Optional, Protocol, Tuple, Union, runtime_checkable

from pydantic import BaseModel, Field

log = logging.getLogger(__name__)


class _Cancelled:
    """Résultat d'une confirmation annulée (distinct de "" qui vaut « confirmé »)."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CANCELLED"

    def __bool__(self) -> bool:
        return False


CANCELLED = _Cancelled()

UploadFile = Union[Tuple[str, bytes], BinaryIO]


# ── Modèles échangés ────────────────────────────────────────────────────────

class PromptOptions(BaseModel):
    label: str
    placeholder: Optional[str] = None


class ConfirmOptions(BaseModel):
    title: str
    message: str
    confirm_text: Optional[str] = None
    cancel_text: Optional[str] = None
    prompt: Optional[PromptOptions] = None


class ContentItem(BaseModel):
    name: str
    path: str


class ContentGroup(BaseModel):
    id: str
    label: str
    items: List[ContentItem] = Field(default_factory=list)


# ── Protocols ───────────────────────────────────────────────────────────────

@runtime_checkable
class ContentStore(Protocol):
    def load(self, pathname: str) -> Dict[str, Any]: ...
    def save(self, pathname: str, tree: Dict[str, Any]) -> Dict[str, Any]: ...
    def list(self) -> List[Dict[str, Any]]: ...
    def create(self, name: str, type_id: str) -> Dict[str, Any]: ...
    def delete(self, pathname: str) -> Dict[str, Any]: ...
    def list_entries(self, collection: str, page: int = 1, limit: int = 10,
                     sort_order: str = "desc") -> Dict[str, Any]: ...
    def get_entry(self, collection: str, entry_id: str) -> Dict[str, Any]: ...


@runtime_checkable
class AssetStore(Protocol):
    def upload(self, file: UploadFile) -> Dict[str, Any]: ...


class Confirm(Protocol):
    def __call__(self, options: ConfirmOptions) -> Any: ...


# ── Implémentations simples ─────────────────────────────────────────────────

class Notifier:
    """Dernière notification affichée (une seule à la fois, fermable)."""

    def __init__(self):
        self.current: Optional[Tuple[str, str]] = None
        self.history: List[Tuple[str, str]] = []

    def show(self, message: str, level: str = "success") -> None:
        log_fn = log.error if level == "error" else log.info
        log_fn("notification [%s] %s", level, message)
        self.current = (message, level)
        self.history.append(self.current)

    def dismiss(self) -> None:
        self.current = None


class ScriptedConfirm:
    """
    Réponses de confirmation prédéfinies (scripts, tests, mode non interactif).
    Chaque réponse est une str (confirmé, valeur saisie) ou CANCELLED.
    """

    def __init__(self, *answers: Any, default: Any = ""):
        self.answers = list(answers)
        self.default = default
        self.asked: List[ConfirmOptions] = []

    async def __call__(self, options: ConfirmOptions) -> Any:
        self.asked.append(options)
        return self.answers.pop(0) if self.answers else self.default


async def ask(confirm: Confirm, options: ConfirmOptions) -> Any:
    """Pose la question ; accepte un collaborateur sync ou async."""
    answer = confirm(options)
    if inspect.isawaitable(answer):
        answer = await answer
    return answer


async def call_collaborator(fn, *args: Any, **kwargs: Any) -> Any:
    """Appelle un collaborateur sync (thread) ou async (await)."""
    if inspect.iscoroutinefunction(fn):
        return await fn(*args, **kwargs)
    result = await asyncio.to_thread(fn, *args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
