"""Core: chemins, schémas, erreurs."""
from .errors import (
    ConfigNotFound,
    ContentValidationError,
    EditorError,
    NetworkError,
    NotFound,
    PathSyntaxError,
    PathTypeMismatch,
    UnsupportedFieldType,
)
from .path import Path, PathLike, deep_equal, get_in, set_in
from .schemas import (
    ArrayField,
    BaseField,
    BuilderConfig,
    PageSchema,
    SectionConfig,
    empty_tree,
    parse_field,
    validate_tree,
)

__all__ = [
    "ConfigNotFound", "ContentValidationError", "EditorError", "NetworkError",
    "NotFound", "PathSyntaxError", "PathTypeMismatch", "UnsupportedFieldType",
    "Path", "PathLike", "deep_equal", "get_in", "set_in",
    "ArrayField", "BaseField", "BuilderConfig", "PageSchema", "SectionConfig",
    "empty_tree", "parse_field", "validate_tree",
]
