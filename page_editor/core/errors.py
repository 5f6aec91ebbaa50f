"""
Taxonomie des erreurs de l'éditeur.

NotFound / ContentValidationError / NetworkError → collaborateurs (store, upload)
PathTypeMismatch / PathSyntaxError             → résolution de chemins
ConfigNotFound / UnsupportedFieldType          → schéma (non bloquantes)
"""
from typing import Any, Optional, Tuple


class EditorError(Exception):
    """Erreur de base de l'éditeur."""


class NotFound(EditorError):
    """Aucun contenu au chemin demandé (état « introuvable », pas une bannière d'erreur)."""

    def __init__(self, pathname: str):
        super().__init__(f"Contenu introuvable : {pathname}")
        self.pathname = pathname


class ContentValidationError(EditorError):
    """Réponse d'un collaborateur sans la forme attendue (ex: pas de `tree`)."""


class NetworkError(EditorError):
    """Échec de transport vers un collaborateur distant."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PathSyntaxError(EditorError, ValueError):
    """Chemin textuel invalide (segment vide, crochet non fermé…)."""


class PathTypeMismatch(EditorError, TypeError):
    """Segment incompatible avec la valeur existante (index sur un objet, champ sur une liste)."""

    def __init__(self, segment: Any, path_so_far: Tuple[Any, ...], found: Any):
        self.segment = segment
        self.path_so_far = path_so_far
        self.found_type = type(found).__name__
        where = ".".join(str(s) for s in path_so_far) or "<racine>"
        super().__init__(
            f"Segment {segment!r} incompatible avec une valeur {self.found_type} (chemin={where})"
        )


class ConfigNotFound(EditorError):
    """La sélection ne correspond à aucune entrée du schéma."""


class UnsupportedFieldType(EditorError):
    """Type de champ inconnu: isolé au champ concerné."""

    def __init__(self, field_type: str, name: str = ""):
        super().__init__(f"Type de champ non supporté : {field_type}")
        self.field_type = field_type
        self.name = name
