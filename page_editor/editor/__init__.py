"""Éditeur: navigation, dispatch des champs, structure, session, collections."""
from .collections import CollectionBrowser, EntryDetail, EntryPage
from .fields import FieldDispatcher, FieldKind, FieldsView, FieldView, RepeaterView
from .management import ContentManager
from .navigation import Breadcrumb, NavigationStack
from .preview import BlockRenderer, EditableBlock, editable_blocks, editable_globals
from .session import EditorSession, Panel
from .structure import StructuralEditor, array_move

__all__ = [
    "CollectionBrowser", "EntryDetail", "EntryPage",
    "FieldDispatcher", "FieldKind", "FieldsView", "FieldView", "RepeaterView",
    "ContentManager",
    "Breadcrumb", "NavigationStack",
    "BlockRenderer", "EditableBlock", "editable_blocks", "editable_globals",
    "EditorSession", "Panel",
    "StructuralEditor", "array_move",
]
