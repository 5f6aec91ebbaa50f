"""
Page Editor: éditeur de contenu piloté par schéma.

Usage:
    >>> from page_editor import EditorSession, ScriptedConfirm
    >>> from page_editor.services.sql_store import SqlContentStore
    >>> session = await EditorSession.open("/", SqlContentStore(), confirm=ScriptedConfirm())
    >>> session.select_block(0)
    >>> session.current_view().get("title").change("Bonjour")
    >>> await session.save()
"""
__version__ = "0.1.0"

from .core import Path, PageSchema, get_in, set_in
from .editor import ContentManager, EditorSession, NavigationStack, StructuralEditor
from .services import CANCELLED, Notifier, ScriptedConfirm

__all__ = [
    "Path", "PageSchema", "get_in", "set_in",
    "ContentManager", "EditorSession", "NavigationStack", "StructuralEditor",
    "CANCELLED", "Notifier", "ScriptedConfirm",
]
