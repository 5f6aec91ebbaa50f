"""
Dispatch des champs : visibilité conditionnelle + contrat d'édition par type.

Pour la frame courante :
  - config à `fields` (section / objet) → FieldsView (une FieldView par champ visible)
  - config `array`                        → RepeaterView (items + drill-down)
  - champ scalaire (ex: page.title)       → FieldsView à un seul champ

Toute édition passe par on_update(chemin complet, valeur), seul chemin
d'écriture dans l'arbre.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.errors import UnsupportedFieldType
from ..core.path import Path, get_in
from ..core.schemas import (
    ArrayField,
    BaseField,
    BuilderConfig,
    ObjectField,
    SectionConfig,
    UnknownField,
)
from .navigation import Breadcrumb, item_label

log = logging.getLogger(__name__)

OnUpdate = Callable[[Path, Any], None]
OnDrillDown = Callable[..., Any]


class FieldKind(str, Enum):
    INPUT      = "input"
    TEXTAREA   = "textarea"
    LINK       = "link"
    IMAGE      = "image"
    RICHTEXT   = "richtext"
    COLLECTION = "collection"
    TOGGLE     = "toggle"
    DRILLDOWN  = "drilldown"
    ERROR      = "error"


_KINDS: Dict[str, FieldKind] = {
    "string":     FieldKind.INPUT,
    "text":       FieldKind.TEXTAREA,
    "link":       FieldKind.LINK,
    "image":      FieldKind.IMAGE,
    "richText":   FieldKind.RICHTEXT,
    "collection": FieldKind.COLLECTION,
    "boolean":    FieldKind.TOGGLE,
    "object":     FieldKind.DRILLDOWN,
    "array":      FieldKind.DRILLDOWN,
}

# valeurs texte : None → ""
_TEXT_KINDS = {FieldKind.INPUT, FieldKind.TEXTAREA, FieldKind.LINK, FieldKind.RICHTEXT, FieldKind.COLLECTION}


# ── Visibilité ──────────────────────────────────────────────────────────────

def _json_kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


def strict_equals(a: Any, b: Any) -> bool:
    """Égalité stricte façon JSON : même type et même valeur (1 ≠ "1", True ≠ 1)."""
    return _json_kind(a) == _json_kind(b) and a == b


def is_visible(field_config: BaseField, data: Any) -> bool:
    condition = field_config.condition
    if condition is None:
        return True
    current = data.get(condition.field) if isinstance(data, dict) else None
    return strict_equals(current, condition.value)


def visible_fields(fields: List[BaseField], data: Any) -> List[BaseField]:
    return [f for f in fields if is_visible(f, data)]


# ── Vues ────────────────────────────────────────────────────────────────────

@dataclass
class FieldView:
    """Un champ éditable, prêt à être affiché par l'hôte."""
    name: str
    label: str
    kind: FieldKind
    path: Path
    value: Any
    config: BaseField
    options: List[Tuple[Any, str]] = field(default_factory=list)
    summary: Optional[str] = None
    error: Optional[str] = None
    on_update: Optional[OnUpdate] = field(default=None, repr=False, compare=False)
    on_select: Optional[Callable[[], Any]] = field(default=None, repr=False, compare=False)

    @property
    def editable(self) -> bool:
        return self.kind not in (FieldKind.DRILLDOWN, FieldKind.ERROR)

    def change(self, value: Any) -> None:
        if not self.editable:
            raise TypeError(f"Le champ {self.name!r} ({self.kind.value}) n'est pas éditable en ligne")
        self.on_update(self.path, value)

    def select(self) -> Any:
        """Drill-down dans un champ objet / répéteur."""
        if self.kind is not FieldKind.DRILLDOWN:
            raise TypeError(f"Le champ {self.name!r} ne se parcourt pas")
        return self.on_select()


@dataclass
class FieldsView:
    path: Path
    label: str
    fields: List[FieldView] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    def get(self, name: str) -> Optional[FieldView]:
        return next((f for f in self.fields if f.name == name), None)

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.fields]


@dataclass
class ItemView:
    index: int
    id: Optional[str]
    label: str


@dataclass
class RepeaterView:
    path: Path
    label: str
    config: ArrayField
    items: List[ItemView] = field(default_factory=list)
    on_open: Optional[Callable[[int], Any]] = field(default=None, repr=False, compare=False)

    def open(self, index: int) -> Any:
        return self.on_open(index)


# ── Dispatcher ──────────────────────────────────────────────────────────────

def item_section(config: ArrayField) -> SectionConfig:
    """Config d'un item de répéteur : ses item_fields sous forme de liste."""
    return SectionConfig(label="", fields=list(config.item_fields.values()))


class FieldDispatcher:
    """
    Construit la vue d'une frame à partir du schéma et des données.

    Args:
        on_update: callback d'écriture (chemin complet, valeur)
        on_drill_down: callback (field_name, config, index=None) de la pile de navigation
        config: configuration de session (content_types des champs collection)
    """

    def __init__(
        self,
        on_update: OnUpdate,
        on_drill_down: OnDrillDown,
        config: Optional[BuilderConfig] = None,
    ):
        self.on_update = on_update
        self.on_drill_down = on_drill_down
        self.config = config or BuilderConfig()

    def render(self, frame: Breadcrumb, tree: Any):
        data = get_in(tree, frame.path)
        if frame.config is None:
            return FieldsView(
                path=frame.path, label=frame.label,
                error="Configuration de champ introuvable.",
            )
        if isinstance(frame.config, ArrayField):
            return self._render_repeater(frame, data)
        if isinstance(frame.config, BaseField) and not isinstance(frame.config, ObjectField):
            return self._render_single(frame, data)
        return self._render_fields(frame, data)

    def _render_single(self, frame: Breadcrumb, data: Any) -> FieldsView:
        # champ scalaire sélectionné comme racine (ex: page.title)
        view = self.field_view(frame.config, frame.path, data)
        return FieldsView(path=frame.path, label=frame.label, fields=[view])

    def _render_repeater(self, frame: Breadcrumb, data: Any) -> RepeaterView:
        items = data if isinstance(data, list) else []
        section = item_section(frame.config)
        return RepeaterView(
            path=frame.path,
            label=frame.config.label,
            config=frame.config,
            items=[
                ItemView(
                    index=i,
                    id=item.get("id") if isinstance(item, dict) else None,
                    label=item_label(item, None, i),
                )
                for i, item in enumerate(items)
            ],
            on_open=lambda index: self.on_drill_down("", section, index),
        )

    def _render_fields(self, frame: Breadcrumb, data: Any) -> FieldsView:
        declared = list(getattr(frame.config, "fields", []) or [])
        views = [self.dispatch(f, frame.path, data) for f in visible_fields(declared, data)]
        names = {f.name for f in declared}
        extra = (
            {k: v for k, v in data.items() if k not in names and k != "id"}
            if isinstance(data, dict) else {}
        )
        return FieldsView(path=frame.path, label=frame.label, fields=views, extra=extra)

    def dispatch(self, field_config: BaseField, parent: Path, data: Any) -> FieldView:
        """Associe un champ à son contrat d'édition. Type inconnu → vue en erreur."""
        name = field_config.name
        value = data.get(name) if isinstance(data, dict) else None
        return self.field_view(field_config, parent.child(name), value)

    def field_view(self, field_config: BaseField, path: Path, value: Any) -> FieldView:
        name = field_config.name
        view = FieldView(
            name=name, label=field_config.label, kind=FieldKind.ERROR,
            path=path, value=value, config=field_config, on_update=self.on_update,
        )
        try:
            view.kind = self._kind(field_config)
        except UnsupportedFieldType as e:
            log.warning("%s (champ %s)", e, path)
            view.error = str(e)
            return view

        if view.kind in _TEXT_KINDS:
            view.value = value if value is not None else ""
        if view.kind is FieldKind.TOGGLE:
            view.value = bool(value)
            view.options = [
                (False, field_config.false_label or "Désactivé"),
                (True, field_config.true_label or "Activé"),
            ]
        elif view.kind is FieldKind.COLLECTION:
            view.options = [(key, ct.label) for key, ct in self.config.content_types.items()]
        elif view.kind is FieldKind.DRILLDOWN:
            if isinstance(field_config, ArrayField):
                view.summary = f"{len(value) if isinstance(value, list) else 0} élément(s)"
            else:
                view.summary = "Gérer les champs"
            view.on_select = lambda: self.on_drill_down(name, field_config)
        return view

    @staticmethod
    def _kind(field_config: BaseField) -> FieldKind:
        kind = _KINDS.get(field_config.type)
        if kind is None or isinstance(field_config, UnknownField):
            raise UnsupportedFieldType(field_config.type, field_config.name)
        return kind
