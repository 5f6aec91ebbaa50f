"""
Tests du module core.schemas
  parse_field(dict)          → variante de champ selon `type` (UnknownField sinon)
  PageSchema.model_validate  → clés camelCase, attributs snake_case
  validate_tree(tree)        → arbre d'origine | ContentValidationError
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from page_editor.core.errors import ContentValidationError
from page_editor.core.schemas import (
    ArrayField,
    BooleanField,
    BuilderConfig,
    ObjectField,
    PageSchema,
    SectionConfig,
    StringField,
    UnknownField,
    merged_global_sections,
    parse_field,
    parse_load_response,
    validate_tree,
)


SCHEMA = {
    "pageFields": [
        {"type": "string", "name": "title", "label": "Titre"},
        {"type": "object", "name": "seo", "label": "SEO", "fields": [
            {"type": "text", "name": "description", "label": "Description"},
        ]},
    ],
    "blocks": {
        "features": {
            "label": "Points forts",
            "fields": [
                {"type": "array", "name": "items", "label": "Éléments", "itemFields": {
                    "title": {"type": "string", "label": "Titre", "defaultData": "Nouveau"},
                    "visible": {"type": "boolean", "label": "Visible", "trueLabel": "Oui"},
                }},
            ],
            "defaultData": {"items": []},
        },
    },
    "globalSections": {"header": {"label": "En-tête", "fields": []}},
}


# ── Champs ────────────────────────────────────────────────────────────────

class TestParseField:
    def test_variantes(self):
        assert isinstance(parse_field({"type": "string", "name": "a"}), StringField)
        assert isinstance(parse_field({"type": "text", "name": "a"}), StringField)
        assert isinstance(parse_field({"type": "boolean", "name": "a"}), BooleanField)
        assert isinstance(parse_field({"type": "object", "name": "a"}), ObjectField)

    def test_type_inconnu_conserve(self):
        f = parse_field({"type": "video", "name": "clip", "label": "Clip", "ratio": "16:9"})
        assert isinstance(f, UnknownField)
        assert f.type == "video"
        assert f.model_dump()["ratio"] == "16:9"

    def test_instance_passe_telle_quelle(self):
        f = StringField(name="a")
        assert parse_field(f) is f

    def test_item_fields_nommes_par_leur_cle(self):
        f = parse_field(SCHEMA["blocks"]["features"]["fields"][0])
        assert isinstance(f, ArrayField)
        assert [x.name for x in f.item_fields.values()] == ["title", "visible"]
        assert f.item_fields["title"].default_data == "Nouveau"
        assert f.item_fields["visible"].true_label == "Oui"

    def test_condition(self):
        f = parse_field({"type": "string", "name": "a", "condition": {"field": "mode", "value": "x"}})
        assert f.condition.field == "mode" and f.condition.value == "x"


# ── PageSchema / BuilderConfig ────────────────────────────────────────────

class TestPageSchema:
    def test_parse_complet(self):
        schema = PageSchema.model_validate(SCHEMA)
        assert schema.page_field("title").label == "Titre"
        assert isinstance(schema.page_field("seo"), ObjectField)
        assert schema.page_field("nope") is None
        assert schema.blocks["features"].default_data == {"items": []}

    def test_serialisation_camel_case(self):
        dumped = PageSchema.model_validate(SCHEMA).model_dump(by_alias=True, exclude_none=True)
        assert "pageFields" in dumped and "globalSections" in dumped
        items = dumped["blocks"]["features"]["fields"][0]
        assert "itemFields" in items
        assert items["itemFields"]["visible"]["trueLabel"] == "Oui"

    def test_globales_surchargees_par_config(self):
        schema = PageSchema.model_validate(SCHEMA)
        config = BuilderConfig.model_validate({
            "globalSchemas": {
                "header": {"label": "Menu", "fields": []},
                "footer": {"label": "Pied", "fields": []},
            },
            "contentTypes": {"articles": {"label": "Articles"}},
            "custom": 1,
        })
        merged = merged_global_sections(schema, config)
        assert merged["header"].label == "Menu"
        assert set(merged) == {"header", "footer"}
        assert config.content_types["articles"].label == "Articles"

    def test_cles_hote_conservees(self):
        # endpoint et autres réglages de l'hôte : passés tels quels, non interprétés
        config = BuilderConfig.model_validate({"apiEndpoint": "/api", "theme": "sombre"})
        assert config.model_extra == {"apiEndpoint": "/api", "theme": "sombre"}
        assert set(BuilderConfig.model_fields) == {"global_schemas", "content_types"}

    def test_section_snake_case(self):
        section = SectionConfig(label="X", default_data={"a": 1})
        assert section.default_data == {"a": 1}


# ── Arbre ─────────────────────────────────────────────────────────────────

class TestValidateTree:
    def test_arbre_valide_renvoye_tel_quel(self):
        tree = {"page": {"blocks": [{"id": "b1", "type": "hero", "data": {}, "extra": 1}], "slug": "x"}}
        assert validate_tree(tree) is tree

    def test_ids_dupliques(self):
        tree = {"page": {"blocks": [
            {"id": "b1", "type": "hero", "data": {}},
            {"id": "b1", "type": "text", "data": {}},
        ]}}
        with pytest.raises(ContentValidationError, match="b1"):
            validate_tree(tree)

    @pytest.mark.parametrize("tree", [None, {}, {"page": {"blocks": [{"type": "hero"}]}}, {"page": []}])
    def test_forme_invalide(self, tree):
        with pytest.raises(ContentValidationError):
            validate_tree(tree)


class TestParseLoadResponse:
    def test_ok(self):
        tree, schema = parse_load_response({"tree": {"page": {"blocks": []}}, "schema": SCHEMA})
        assert tree == {"page": {"blocks": []}}
        assert isinstance(schema, PageSchema)

    def test_cles_manquantes(self):
        with pytest.raises(ContentValidationError):
            parse_load_response({"tree": {"page": {"blocks": []}}})

    def test_schema_invalide(self):
        with pytest.raises(ContentValidationError):
            parse_load_response({"tree": {"page": {"blocks": []}}, "schema": {"blocks": []}})
