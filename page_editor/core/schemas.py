"""
Schémas Pydantic de l'éditeur.

Deux familles :
  - Schéma éditable (PageSchema → SectionConfig → FieldConfig) : décrit les champs
  - Forme du contenu (SiteData → PageData → BlockData) : valide l'arbre chargé

Clés JSON en camelCase (pageFields, itemFields, defaultData…), attributs Python
en snake_case.
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    SerializeAsAny,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .errors import ContentValidationError


class SchemaModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Condition(SchemaModel):
    """Affichage conditionnel : visible si data[field] === value."""
    field: str
    value: Any = None


# ── Champs ──────────────────────────────────────────────────────────────────

class BaseField(SchemaModel):
    """Champ de base (classe parente de toutes les variantes)."""
    type: str
    label: str = ""
    name: str
    condition: Optional[Condition] = None
    default_data: Optional[Any] = None  # pré-remplissage des items de répéteur


class StringField(BaseField):
    type: Literal["string", "text"] = "string"


class ArrayField(BaseField):
    """Répéteur : liste d'items structurés décrits par item_fields."""
    type: Literal["array"] = "array"
    item_fields: Dict[str, "FieldConfig"] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _names_from_keys(cls, data: Any) -> Any:
        # itemFields: {"title": {"type": "string"}} → name = "title"
        if isinstance(data, dict):
            raw = data.get("itemFields", data.get("item_fields"))
            if isinstance(raw, dict):
                fixed = {
                    k: ({"name": k, **v} if isinstance(v, dict) and "name" not in v else v)
                    for k, v in raw.items()
                }
                key = "itemFields" if "itemFields" in data else "item_fields"
                data = {**data, key: fixed}
        return data


class LinkField(BaseField):
    type: Literal["link"] = "link"


class ImageField(BaseField):
    type: Literal["image"] = "image"


class BooleanField(BaseField):
    type: Literal["boolean"] = "boolean"
    true_label: Optional[str] = None
    false_label: Optional[str] = None


class ObjectField(BaseField):
    """Objet imbriqué : on y entre par drill-down."""
    type: Literal["object"] = "object"
    fields: List["FieldConfig"] = Field(default_factory=list)


class RichTextField(BaseField):
    type: Literal["richText"] = "richText"


class CollectionField(BaseField):
    type: Literal["collection"] = "collection"


class UnknownField(BaseField):
    """Type non reconnu: conservé tel quel, signalé au rendu."""
    model_config = ConfigDict(extra="allow")


_FIELD_REGISTRY: dict = {
    "string":     StringField,
    "text":       StringField,
    "array":      ArrayField,
    "link":       LinkField,
    "image":      ImageField,
    "boolean":    BooleanField,
    "object":     ObjectField,
    "richText":   RichTextField,
    "collection": CollectionField,
}


def parse_field(value: Any) -> Any:
    """Instancie la variante de champ correspondant au tag `type` (UnknownField sinon)."""
    if isinstance(value, BaseField) or not isinstance(value, dict):
        return value
    field_cls = _FIELD_REGISTRY.get(value.get("type"), UnknownField)
    return field_cls.model_validate(value)


FieldConfig = Annotated[SerializeAsAny[BaseField], BeforeValidator(parse_field)]

ArrayField.model_rebuild()
ObjectField.model_rebuild()


# ── Sections / schéma de page ───────────────────────────────────────────────

class SectionConfig(SchemaModel):
    """Configuration d'un type de bloc ou d'une section globale."""
    label: str = ""
    fields: List[FieldConfig] = Field(default_factory=list)
    default_data: Optional[Dict[str, Any]] = None


class PageSchema(SchemaModel):
    """Structure éditable : champs de page, registry de blocs, sections globales."""
    page_fields: List[FieldConfig] = Field(default_factory=list)
    blocks: Dict[str, SectionConfig] = Field(default_factory=dict)
    global_sections: Dict[str, SectionConfig] = Field(default_factory=dict)

    def page_field(self, name: str) -> Optional[BaseField]:
        return next((f for f in self.page_fields if f.name == name), None)


class ContentType(SchemaModel):
    model_config = ConfigDict(extra="allow")
    label: str


class BuilderConfig(SchemaModel):
    """Configuration de session (injectée, jamais globale)."""
    model_config = ConfigDict(extra="allow")
    global_schemas: Dict[str, SectionConfig] = Field(default_factory=dict)
    content_types: Dict[str, ContentType] = Field(default_factory=dict)


def merged_global_sections(
    schema: PageSchema, config: Optional[BuilderConfig] = None
) -> Dict[str, SectionConfig]:
    """Sections globales du schéma, surchargées par config.global_schemas."""
    merged = dict(schema.global_sections)
    if config is not None:
        merged.update(config.global_schemas)
    return merged


# ── Forme du contenu ────────────────────────────────────────────────────────

class BlockData(BaseModel):
    model_config = ConfigDict(extra="allow")
    id: str
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)


class PageData(BaseModel):
    model_config = ConfigDict(extra="allow")
    blocks: List[BlockData] = Field(default_factory=list)


class SiteData(BaseModel):
    """Arbre de contenu complet : {page: {blocks, ...}, globals: {...}}."""
    model_config = ConfigDict(extra="allow")
    page: PageData
    globals: Dict[str, Any] = Field(default_factory=dict)


def empty_tree() -> dict:
    return {"page": {"blocks": []}, "globals": {}}


def validate_tree(tree: Any) -> dict:
    """
    Vérifie la forme de l'arbre (blocs {id, type, data}, ids uniques).
    Renvoie l'arbre d'origine : les clés hors schéma sont conservées.
    """
    try:
        site = SiteData.model_validate(tree)
    except ValidationError as e:
        raise ContentValidationError(f"Arbre de contenu invalide : {e}") from e
    ids = [b.id for b in site.page.blocks]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ContentValidationError(f"Identifiants de bloc dupliqués : {duplicates}")
    return tree


def parse_load_response(payload: Any) -> Tuple[dict, PageSchema]:
    """Réponse `load` du store → (arbre, schéma). ContentValidationError si incomplète."""
    if not isinstance(payload, dict) or "tree" not in payload or "schema" not in payload:
        raise ContentValidationError("Réponse de chargement sans `tree` ni `schema`")
    tree = validate_tree(payload["tree"])
    schema = payload["schema"]
    if not isinstance(schema, PageSchema):
        try:
            schema = PageSchema.model_validate(schema)
        except ValidationError as e:
            raise ContentValidationError(f"Schéma invalide : {e}") from e
    return tree, schema
