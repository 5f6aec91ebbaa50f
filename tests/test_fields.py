"""
Tests du module editor.fields
  strict_equals / is_visible      → visibilité conditionnelle (égalité stricte)
  FieldDispatcher.render(frame)   → FieldsView | RepeaterView
  FieldDispatcher.dispatch(field) → FieldView (type inconnu → vue en erreur)
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from page_editor.core.path import Path
from page_editor.core.schemas import BuilderConfig, SectionConfig, parse_field
from page_editor.editor.fields import (
    FieldDispatcher,
    FieldKind,
    FieldsView,
    RepeaterView,
    is_visible,
    strict_equals,
)
from page_editor.editor.navigation import Breadcrumb


SECTION = SectionConfig.model_validate({
    "label": "Bannière",
    "fields": [
        {"type": "string", "name": "title", "label": "Titre"},
        {"type": "text", "name": "subtitle", "label": "Sous-titre"},
        {"type": "select", "name": "mode", "label": "Mode"},
        {"type": "string", "name": "videoUrl", "label": "Vidéo", "condition": {"field": "mode", "value": "video"}},
        {"type": "boolean", "name": "dark", "label": "Sombre", "trueLabel": "Nuit"},
        {"type": "collection", "name": "source", "label": "Source"},
        {"type": "image", "name": "image", "label": "Image"},
        {"type": "link", "name": "cta", "label": "Bouton"},
        {"type": "richText", "name": "body", "label": "Texte"},
        {"type": "object", "name": "style", "label": "Style", "fields": []},
        {"type": "array", "name": "items", "label": "Éléments", "itemFields": {
            "title": {"type": "string", "label": "Titre"},
        }},
    ],
})

DATA = {
    "id": "ignored",
    "title": None,
    "mode": "image",
    "dark": None,
    "items": [{"id": "i1", "title": "Un"}, {"id": "i2"}],
    "legacy": "conservé",
}

FRAME = Breadcrumb(path=Path("page.blocks.0.data"), label="Bannière", config=SECTION)


class Recorder:
    def __init__(self):
        self.updates = []
        self.drills = []

    def on_update(self, path, value):
        self.updates.append((path, value))

    def on_drill_down(self, name, config, index=None):
        self.drills.append((name, config, index))
        return name


def make_dispatcher(config=None):
    rec = Recorder()
    return FieldDispatcher(rec.on_update, rec.on_drill_down, config), rec


def render(data=DATA, config=None):
    dispatcher, rec = make_dispatcher(config)
    return dispatcher.render(FRAME, {"page": {"blocks": [{"id": "b", "type": "hero", "data": data}]}}), rec


# ── Visibilité ────────────────────────────────────────────────────────────

class TestVisibilite:
    @pytest.mark.parametrize("a, b, expected", [
        ("video", "video", True),
        (1, "1", False),
        (True, 1, False),
        (1, 1.0, True),
        (None, None, True),
        (False, False, True),
    ])
    def test_strict_equals(self, a, b, expected):
        assert strict_equals(a, b) is expected

    def test_sans_condition(self):
        assert is_visible(parse_field({"type": "string", "name": "a"}), {})

    def test_condition(self):
        f = parse_field({"type": "string", "name": "a", "condition": {"field": "mode", "value": "video"}})
        assert is_visible(f, {"mode": "video"})
        assert not is_visible(f, {"mode": "image"})
        assert not is_visible(f, {})
        assert not is_visible(f, None)


# ── Rendu d'une section ───────────────────────────────────────────────────

class TestRenderFields:
    def test_champs_visibles(self):
        view, _ = render()
        assert isinstance(view, FieldsView)
        assert "videoUrl" not in view.names
        assert view.names[:3] == ["title", "subtitle", "mode"]

    def test_condition_basculee(self):
        view, _ = render({**DATA, "mode": "video"})
        assert "videoUrl" in view.names

    def test_cles_hors_schema(self):
        view, _ = render()
        assert view.extra == {"legacy": "conservé"}

    def test_kinds(self):
        view, _ = render()
        kinds = {f.name: f.kind for f in view.fields}
        assert kinds["title"] is FieldKind.INPUT
        assert kinds["subtitle"] is FieldKind.TEXTAREA
        assert kinds["image"] is FieldKind.IMAGE
        assert kinds["cta"] is FieldKind.LINK
        assert kinds["body"] is FieldKind.RICHTEXT
        assert kinds["source"] is FieldKind.COLLECTION
        assert kinds["dark"] is FieldKind.TOGGLE
        assert kinds["style"] is FieldKind.DRILLDOWN
        assert kinds["items"] is FieldKind.DRILLDOWN

    def test_type_inconnu_isole(self):
        view, _ = render()
        mode = view.get("mode")
        assert mode.kind is FieldKind.ERROR
        assert mode.error == "Type de champ non supporté : select"
        assert not mode.editable
        # les autres champs sont rendus normalement
        assert view.get("title").kind is FieldKind.INPUT

    def test_texte_none_devient_vide(self):
        view, _ = render()
        assert view.get("title").value == ""
        assert view.get("subtitle").value == ""

    def test_toggle(self):
        view, _ = render()
        dark = view.get("dark")
        assert dark.value is False
        assert dark.options == [(False, "Désactivé"), (True, "Nuit")]

    def test_collection_options(self):
        config = BuilderConfig.model_validate({"contentTypes": {"articles": {"label": "Articles"}}})
        view, _ = render(config=config)
        assert view.get("source").options == [("articles", "Articles")]

    def test_resumes_drilldown(self):
        view, _ = render()
        assert view.get("items").summary == "2 élément(s)"
        assert view.get("style").summary == "Gérer les champs"

    def test_frame_sans_config(self):
        dispatcher, _ = make_dispatcher()
        view = dispatcher.render(Breadcrumb(path=Path("x"), label="X", config=None), {})
        assert view.error and view.fields == []


# ── Contrat d'édition ─────────────────────────────────────────────────────

class TestEdition:
    def test_change_chemin_complet(self):
        view, rec = render()
        view.get("title").change("Bonjour")
        view.get("dark").change(True)
        assert rec.updates == [
            (Path("page.blocks.0.data.title"), "Bonjour"),
            (Path("page.blocks.0.data.dark"), True),
        ]

    def test_drilldown_non_editable(self):
        view, _ = render()
        with pytest.raises(TypeError):
            view.get("items").change([])

    def test_select_drilldown(self):
        view, rec = render()
        view.get("items").select()
        name, config, index = rec.drills[0]
        assert name == "items" and config.label == "Éléments" and index is None

    def test_champ_scalaire_comme_racine(self):
        dispatcher, rec = make_dispatcher()
        title = parse_field({"type": "string", "name": "title", "label": "Titre"})
        frame = Breadcrumb(path=Path("page.title"), label="Titre", config=title)
        view = dispatcher.render(frame, {"page": {"title": "Accueil", "blocks": []}})
        assert isinstance(view, FieldsView) and view.names == ["title"]
        field_view = view.get("title")
        assert field_view.path == Path("page.title") and field_view.value == "Accueil"
        field_view.change("X")
        assert rec.updates == [(Path("page.title"), "X")]

    def test_select_sur_champ_simple(self):
        view, _ = render()
        with pytest.raises(TypeError):
            view.get("title").select()


# ── Répéteur ──────────────────────────────────────────────────────────────

class TestRepeater:
    def _frame(self):
        items = SECTION.fields[-1]
        return Breadcrumb(path=Path("page.blocks.0.data.items"), label="Éléments", config=items)

    def test_items(self):
        dispatcher, _ = make_dispatcher()
        tree = {"page": {"blocks": [{"id": "b", "type": "hero", "data": DATA}]}}
        view = dispatcher.render(self._frame(), tree)
        assert isinstance(view, RepeaterView)
        assert [(i.index, i.id, i.label) for i in view.items] == [(0, "i1", "Un"), (1, "i2", "Élément #2")]

    def test_open_item(self):
        dispatcher, rec = make_dispatcher()
        view = dispatcher.render(self._frame(), {})
        assert view.items == []
        view.open(1)
        name, config, index = rec.drills[0]
        assert name == "" and index == 1
        assert [f.name for f in config.fields] == ["title"]
