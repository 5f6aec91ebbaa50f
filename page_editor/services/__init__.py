"""Collaborateurs: contrats + implémentations (SQLite, HTTP, disque local)."""
from .base import CANCELLED, ConfirmOptions, Notifier, PromptOptions, ScriptedConfirm

__all__ = ["CANCELLED", "ConfirmOptions", "Notifier", "PromptOptions", "ScriptedConfirm"]
