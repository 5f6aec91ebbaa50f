"""
Chemins adressés dans l'arbre de contenu: parse + get_in / set_in purs.

Grammaire canonique : segments séparés par des points, un segment entièrement
numérique est un index de liste.
    "page.blocks.0.data.title"  ≡  "page.blocks[0].data.title"

Path est un tuple de segments : str = champ, int = index.
L'arbre est une valeur JSON générique (dict / list / scalaire).
"""
import re
from typing import Any, Iterable, Tuple, Union

from .errors import PathSyntaxError, PathTypeMismatch

Segment = Union[str, int]

_PART_RE = re.compile(r"^(?P<name>[^\[\]]*)(?P<indexes>(?:\[\d+\])*)$")
_INDEX_RE = re.compile(r"\[(\d+)\]")


def _parse(text: str) -> Tuple[Segment, ...]:
    """Découpe "a.0.b" / "a[0].b" en segments normalisés."""
    if text == "":
        return ()
    segments = []
    for part in text.split("."):
        m = _PART_RE.match(part)
        if m is None:
            raise PathSyntaxError(f"Segment invalide {part!r} dans {text!r}")
        name, indexes = m.group("name"), m.group("indexes")
        if name == "" and not indexes:
            raise PathSyntaxError(f"Segment vide dans {text!r}")
        if name:
            segments.append(int(name) if name.isdigit() else name)
        segments.extend(int(i) for i in _INDEX_RE.findall(indexes))
    return tuple(segments)


def _check_segment(segment: Any) -> Segment:
    if isinstance(segment, bool):
        raise PathSyntaxError(f"Segment invalide : {segment!r}")
    if isinstance(segment, int):
        if segment < 0:
            raise PathSyntaxError(f"Index négatif : {segment}")
        return segment
    if isinstance(segment, str) and segment:
        return int(segment) if segment.isdigit() else segment
    raise PathSyntaxError(f"Segment invalide : {segment!r}")


class Path(tuple):
    """
    Chemin immuable vers une valeur de l'arbre.

    >>> Path("page.blocks[0].data")
    Path('page.blocks.0.data')
    >>> Path(("page", "blocks", 0)).child("data") == Path("page.blocks.0.data")
    True
    """

    def __new__(cls, value: Union[str, Iterable[Any], "Path"] = ()):
        if isinstance(value, Path):
            return value
        if isinstance(value, str):
            segments = _parse(value)
        else:
            segments = tuple(_check_segment(s) for s in value)
        return super().__new__(cls, segments)

    @classmethod
    def parse(cls, text: str) -> "Path":
        return cls(_parse(text))

    def __str__(self) -> str:
        return ".".join(str(s) for s in self)

    def __repr__(self) -> str:
        return f"Path({str(self)!r})"

    @property
    def parent(self) -> "Path":
        return Path(self[:-1])

    def child(self, name: str) -> "Path":
        """Ajoute un segment champ (un nom vide renvoie le chemin tel quel)."""
        if not name:
            return self
        return Path(tuple(self) + _parse(name))

    def item(self, index: int) -> "Path":
        """Ajoute un segment index."""
        return Path(tuple(self) + (_check_segment(index),))

    def startswith(self, prefix: Union[str, "Path"]) -> bool:
        prefix = Path(prefix)
        return tuple(self[: len(prefix)]) == tuple(prefix)

    def is_strict_prefix_of(self, other: Union[str, "Path"]) -> bool:
        other = Path(other)
        return len(other) > len(self) and other.startswith(self)


PathLike = Union[str, Path, Tuple[Segment, ...]]


# ── Lecture ─────────────────────────────────────────────────────────────────

def get_in(tree: Any, path: PathLike, default: Any = None) -> Any:
    """
    Lit la valeur au chemin donné.
    Un intermédiaire absent (ou de mauvais type) renvoie `default`, jamais d'exception.
    """
    current = tree
    for segment in Path(path):
        if isinstance(segment, int):
            # index sur un objet : mauvais type, comme set_in
            if not isinstance(current, list) or segment >= len(current):
                return default
            current = current[segment]
        elif isinstance(current, dict) and segment in current:
            current = current[segment]
        else:
            return default
    return current


# ── Écriture (copy-on-write) ────────────────────────────────────────────────

def _assoc(node: Any, segments: Tuple[Segment, ...], depth: int, value: Any) -> Any:
    if depth == len(segments):
        return value
    segment = segments[depth]
    if node is None:
        node = [] if isinstance(segment, int) else {}

    if isinstance(segment, int):
        if not isinstance(node, list):
            raise PathTypeMismatch(segment, segments[:depth], node)
        copy = list(node)
        if segment >= len(copy):
            copy.extend([None] * (segment + 1 - len(copy)))
        copy[segment] = _assoc(copy[segment], segments, depth + 1, value)
        return copy

    if not isinstance(node, dict):
        raise PathTypeMismatch(segment, segments[:depth], node)
    copy = dict(node)
    copy[segment] = _assoc(node.get(segment), segments, depth + 1, value)
    return copy


def set_in(tree: Any, path: PathLike, value: Any) -> Any:
    """
    Renvoie un nouvel arbre avec `value` au chemin donné.

    Seuls les conteneurs traversés sont copiés, le reste est partagé.
    Les intermédiaires absents (ou None) sont créés : liste si le segment
    suivant est un index, dict sinon.

    Raises:
        PathTypeMismatch: index sur une valeur non-liste, ou champ sur une valeur non-dict
    """
    return _assoc(tree, Path(path), 0, value)


# ── Égalité profonde ────────────────────────────────────────────────────────

def deep_equal(a: Any, b: Any) -> bool:
    """Égalité structurelle JSON : True ≠ 1, 1 == 1.0."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, dict):
        return (
            isinstance(b, dict)
            and a.keys() == b.keys()
            and all(deep_equal(a[k], b[k]) for k in a)
        )
    if isinstance(a, (list, tuple)):
        return (
            isinstance(b, (list, tuple))
            and len(a) == len(b)
            and all(deep_equal(x, y) for x, y in zip(a, b))
        )
    if isinstance(b, (dict, list, tuple)):
        return False
    return a == b
