"""
Tests du module editor.navigation
  select(tree, path)                  → frame racine | None (pile vidée)
  drill_down(tree, name, config, i)   → frame enfant (chemin strictement prolongé)
  go_back(n)                          → garde les frames 0..n
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from page_editor.core.errors import ConfigNotFound
from page_editor.core.path import Path
from page_editor.core.schemas import BuilderConfig, PageSchema
from page_editor.editor.fields import item_section
from page_editor.editor.navigation import NavigationStack, item_label


SCHEMA = PageSchema.model_validate({
    "pageFields": [
        {"type": "object", "name": "seo", "label": "SEO", "fields": [
            {"type": "string", "name": "title", "label": "Titre SEO"},
        ]},
    ],
    "blocks": {
        "features": {
            "label": "Points forts",
            "fields": [
                {"type": "string", "name": "title", "label": "Titre"},
                {"type": "array", "name": "items", "label": "Éléments", "itemFields": {
                    "title": {"type": "string", "label": "Titre"},
                    "links": {"type": "array", "label": "Liens", "itemFields": {
                        "url": {"type": "string", "label": "URL"},
                    }},
                }},
            ],
        },
    },
    "globalSections": {"footer": {"label": "Pied de page", "fields": []}},
})

TREE = {
    "page": {
        "seo": {"title": "x"},
        "blocks": [
            {"id": "b1", "type": "features", "data": {
                "title": "T",
                "items": [
                    {"id": "i1", "title": "Premier", "links": [{"id": "l1", "url": "/a"}]},
                    {"id": "i2"},
                ],
            }},
            {"id": "b2", "type": "ghost", "data": {}},
        ],
    },
    "globals": {"footer": {}, "header": {}},
}


def make_stack(config=None):
    return NavigationStack(SCHEMA, config)


def items_field():
    return SCHEMA.blocks["features"].fields[1]


# ── Sélection ─────────────────────────────────────────────────────────────

class TestSelect:
    def test_bloc(self):
        nav = make_stack()
        root = nav.select(TREE, "page.blocks.0.data")
        assert root.path == Path("page.blocks.0.data")
        assert root.label == "Points forts"
        assert len(nav) == 1 and nav.current is root

    def test_champ_de_page(self):
        nav = make_stack()
        root = nav.select(TREE, "page.seo")
        assert root.label == "SEO"

    def test_section_globale(self):
        nav = make_stack()
        assert nav.select(TREE, "globals.footer").label == "Pied de page"

    def test_section_globale_de_config(self):
        config = BuilderConfig.model_validate({"globalSchemas": {"header": {"label": "Menu", "fields": []}}})
        nav = make_stack(config)
        assert nav.select(TREE, "globals.header").label == "Menu"

    def test_type_de_bloc_inconnu_vide_la_pile(self):
        nav = make_stack()
        nav.select(TREE, "page.blocks.0.data")
        assert nav.select(TREE, "page.blocks.1.data") is None
        assert len(nav) == 0 and not nav

    def test_chemin_sans_categorie(self):
        nav = make_stack()
        assert nav.select(TREE, "globals.header") is None
        assert nav.select(TREE, "other.x") is None
        assert nav.select(TREE, "page.blocks.7.data") is None

    def test_strict_leve(self):
        with pytest.raises(ConfigNotFound):
            make_stack().select(TREE, "globals.header", strict=True)

    def test_reselection_remplace_la_pile(self):
        nav = make_stack()
        nav.select(TREE, "page.blocks.0.data")
        nav.drill_down(TREE, "items", items_field())
        nav.select(TREE, "globals.footer")
        assert nav.labels() == ["Pied de page"]


# ── Drill-down ────────────────────────────────────────────────────────────

class TestDrillDown:
    def test_profondeur_et_chemins(self):
        nav = make_stack()
        nav.select(TREE, "page.blocks.0.data")
        repeater = nav.drill_down(TREE, "items", items_field())
        item = nav.drill_down(TREE, "", item_section(items_field()), 0)
        links_field = items_field().item_fields["links"]
        links = nav.drill_down(TREE, "links", links_field)
        link = nav.drill_down(TREE, "", item_section(links_field), 0)

        assert len(nav) == 5
        assert repeater.path == Path("page.blocks.0.data.items")
        assert repeater.is_repeater
        assert item.path == Path("page.blocks.0.data.items.0")
        assert links.path == Path("page.blocks.0.data.items.0.links")
        assert link.path == Path("page.blocks.0.data.items.0.links.0")
        frames = nav.frames
        for prev, nxt in zip(frames, frames[1:]):
            assert prev.path.is_strict_prefix_of(nxt.path)

    def test_libelles(self):
        nav = make_stack()
        nav.select(TREE, "page.blocks.0.data")
        nav.drill_down(TREE, "items", items_field())
        nav.drill_down(TREE, "", item_section(items_field()), 0)
        assert nav.labels() == ["Points forts", "Éléments", "Premier"]
        nav.go_back(1)
        nav.drill_down(TREE, "", item_section(items_field()), 1)
        assert nav.labels()[-1] == "Élément #2"

    def test_sans_racine(self):
        with pytest.raises(ValueError):
            make_stack().drill_down(TREE, "items", items_field())

    def test_chemin_non_prolonge(self):
        nav = make_stack()
        nav.select(TREE, "page.blocks.0.data")
        with pytest.raises(ValueError):
            nav.drill_down(TREE, "", item_section(items_field()))

    @pytest.mark.parametrize("index", [2, 9])
    def test_item_hors_limites(self, index):
        nav = make_stack()
        nav.select(TREE, "page.blocks.0.data")
        nav.drill_down(TREE, "items", items_field())
        assert nav.drill_down(TREE, "", item_section(items_field()), index) is None
        assert nav.labels() == ["Points forts", "Éléments"]

    def test_item_sur_liste_absente(self):
        nav = make_stack()
        nav.select(TREE, "globals.footer")
        nav.drill_down(TREE, "links", items_field())
        assert nav.drill_down(TREE, "", item_section(items_field()), 0) is None
        assert len(nav) == 2


# ── Retour ────────────────────────────────────────────────────────────────

class TestGoBack:
    def _deep(self):
        nav = make_stack()
        nav.select(TREE, "page.blocks.0.data")
        nav.drill_down(TREE, "items", items_field())
        nav.drill_down(TREE, "", item_section(items_field()), 0)
        return nav

    def test_garde_0_a_n(self):
        nav = self._deep()
        nav.go_back(0)
        assert len(nav) == 1
        assert nav.current.path == Path("page.blocks.0.data")

    @pytest.mark.parametrize("n", [-1, 3, 10])
    def test_index_invalide_sans_effet(self, n):
        nav = self._deep()
        nav.go_back(n)
        assert len(nav) == 3

    def test_dernier_index_sans_effet(self):
        nav = self._deep()
        nav.go_back(2)
        assert len(nav) == 3

    def test_clear(self):
        nav = self._deep()
        nav.clear()
        assert nav.current is None and nav.root is None


def test_item_label_priorites():
    assert item_label({"label": "L", "title": "T"}, "F", 0) == "L"
    assert item_label({"title": "T"}, "F", 0) == "T"
    assert item_label({}, "F", 0) == "F"
    assert item_label({}, None, 2) == "Élément #3"
    assert item_label(None, None, None) == "Élément"
