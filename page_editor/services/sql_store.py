"""
ContentStore SQLAlchemy: contenus du site en SQLite.

Chemins publics :
  pages            → /<slug>          (accueil : "/")
  autres types     → /<type>/<slug>   (ex: /articles/mon-premier-article)

Collections : entrées libres (JSON) listées par page, triées par date.
"""
import logging
import math
import re
import unicodedata
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, sessionmaker

from ..core.errors import ContentValidationError, NotFound
from ..core.schemas import PageSchema, empty_tree, validate_tree
from .database import create_session_factory, jd, jo
from .models import CollectionEntryDB, ContentDB

log = logging.getLogger(__name__)

HOME_PATH = "/"
MAX_PAGE_SIZE = 100


# ── Types de contenu par défaut ─────────────────────────────────────────────

_HEADER = {
    "label": "En-tête",
    "fields": [
        {"type": "image", "name": "logo", "label": "Logo"},
        {"type": "array", "name": "links", "label": "Liens du menu", "itemFields": {
            "link": {"type": "link", "label": "Lien"},
        }},
    ],
}

_FOOTER = {
    "label": "Pied de page",
    "fields": [
        {"type": "text", "name": "copyright", "label": "Mentions"},
    ],
}

PAGE_SCHEMA: Dict[str, Any] = {
    "pageFields": [
        {"type": "string", "name": "title", "label": "Titre de la page"},
    ],
    "blocks": {
        "hero": {
            "label": "Bannière",
            "fields": [
                {"type": "string", "name": "title", "label": "Titre"},
                {"type": "text", "name": "subtitle", "label": "Sous-titre"},
                {"type": "image", "name": "image", "label": "Image"},
                {"type": "link", "name": "cta", "label": "Bouton"},
            ],
            "defaultData": {"title": "Nouveau titre", "subtitle": ""},
        },
        "features": {
            "label": "Points forts",
            "fields": [
                {"type": "string", "name": "title", "label": "Titre"},
                {"type": "array", "name": "items", "label": "Éléments", "itemFields": {
                    "title": {"type": "string", "label": "Titre"},
                    "description": {"type": "text", "label": "Description"},
                }},
            ],
            "defaultData": {"title": "", "items": []},
        },
        "text": {
            "label": "Texte",
            "fields": [
                {"type": "richText", "name": "content", "label": "Contenu"},
            ],
            "defaultData": {"content": ""},
        },
    },
    "globalSections": {"header": _HEADER, "footer": _FOOTER},
}

ARTICLE_SCHEMA: Dict[str, Any] = {
    "pageFields": [
        {"type": "string", "name": "title", "label": "Titre"},
        {"type": "text", "name": "excerpt", "label": "Chapô"},
        {"type": "image", "name": "cover", "label": "Image de couverture"},
        {"type": "boolean", "name": "published", "label": "Statut",
         "trueLabel": "Publié", "falseLabel": "Brouillon"},
        {"type": "richText", "name": "body", "label": "Corps de l'article"},
    ],
    "blocks": PAGE_SCHEMA["blocks"],
    "globalSections": {"header": _HEADER, "footer": _FOOTER},
}

CONTENT_TYPES: Dict[str, Dict[str, Any]] = {
    "pages":    {"label": "Pages",    "prefix": "",          "schema": PAGE_SCHEMA},
    "articles": {"label": "Articles", "prefix": "/articles", "schema": ARTICLE_SCHEMA},
}


# ── Slug ────────────────────────────────────────────────────────────────────

def _no_accent(s: str) -> str:
    return "".join(c for c in unicodedata.normalize("NFD", s) if unicodedata.category(c) != "Mn")


def slugify(name: str) -> str:
    """« Mon Été à Paris ! » → mon-ete-a-paris"""
    s = _no_accent(name.lower().strip())
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")


# ── Store ───────────────────────────────────────────────────────────────────

class SqlContentStore:
    """
    Contenus persistés en base (un enregistrement par pathname).

    Args:
        session_factory: sessionmaker SQLAlchemy (create_session_factory())
        content_types: types créables {id: {label, prefix, schema}}
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        content_types: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.SessionLocal = session_factory or create_session_factory()
        self.content_types = content_types or CONTENT_TYPES

    # ── Lecture ──────────────────────────────────────────────────────────────

    def _get(self, db: Session, pathname: str) -> ContentDB:
        row = db.get(ContentDB, pathname)
        if row is None:
            raise NotFound(pathname)
        return row

    def load(self, pathname: str) -> Dict[str, Any]:
        with self.SessionLocal() as db:
            row = self._get(db, pathname)
            return {"tree": jo(row.tree_json), "schema": jo(row.schema_json)}

    def list(self) -> List[Dict[str, Any]]:
        """Contenus groupés par type, dans l'ordre des types déclarés."""
        with self.SessionLocal() as db:
            rows = db.query(ContentDB).order_by(ContentDB.path).all()
            groups = []
            for type_id, ctype in self.content_types.items():
                items = [{"name": r.name, "path": r.path} for r in rows if r.content_type == type_id]
                groups.append({"id": type_id, "label": ctype["label"], "items": items})
            return groups

    # ── Écriture ─────────────────────────────────────────────────────────────

    def save(self, pathname: str, tree: Dict[str, Any]) -> Dict[str, Any]:
        validate_tree(tree)
        with self.SessionLocal() as db:
            row = self._get(db, pathname)
            row.tree_json = jd(tree)
            row.updated_at = datetime.utcnow()
            db.commit()
        log.info("Contenu sauvegardé : %s", pathname)
        return {"message": "Contenu sauvegardé avec succès !"}

    def create(self, name: str, type_id: str) -> Dict[str, Any]:
        ctype = self.content_types.get(type_id)
        if ctype is None:
            raise ContentValidationError(f"Type de contenu inconnu : {type_id}")
        slug = slugify(name)
        if not slug:
            raise ContentValidationError("Le nom du contenu est obligatoire.")
        pathname = f"{ctype['prefix']}/{slug}"

        with self.SessionLocal() as db:
            if db.get(ContentDB, pathname) is not None:
                raise ContentValidationError(f"Un contenu existe déjà à l'adresse {pathname}")
            tree = empty_tree()
            tree["page"]["title"] = name.strip()
            db.add(ContentDB(
                path=pathname, content_type=type_id, name=name.strip(),
                tree_json=jd(tree), schema_json=jd(ctype["schema"]),
            ))
            db.commit()
        log.info("Contenu créé : %s (%s)", pathname, type_id)
        return {"message": "Contenu créé avec succès !", "path": pathname}

    def delete(self, pathname: str) -> Dict[str, Any]:
        if pathname == HOME_PATH:
            raise ContentValidationError("La page d'accueil ne peut pas être supprimée.")
        with self.SessionLocal() as db:
            db.delete(self._get(db, pathname))
            db.commit()
        log.info("Contenu supprimé : %s", pathname)
        return {"message": "Contenu supprimé avec succès !"}

    def seed(
        self,
        pathname: str,
        name: str,
        tree: Optional[Dict[str, Any]] = None,
        schema: Optional[Any] = None,
        type_id: str = "pages",
    ) -> None:
        """Crée ou remplace un contenu (données initiales, fixtures)."""
        tree = validate_tree(tree if tree is not None else empty_tree())
        if schema is None:
            schema = self.content_types[type_id]["schema"]
        if isinstance(schema, PageSchema):
            schema = schema.model_dump(by_alias=True, exclude_none=True)
        with self.SessionLocal() as db:
            row = db.get(ContentDB, pathname)
            if row is None:
                row = ContentDB(path=pathname)
                db.add(row)
            row.content_type = type_id
            row.name = name
            row.tree_json = jd(tree)
            row.schema_json = jd(schema)
            row.updated_at = datetime.utcnow()
            db.commit()

    # ── Collections ──────────────────────────────────────────────────────────

    @staticmethod
    def _entry(row: CollectionEntryDB) -> Dict[str, Any]:
        return {**jo(row.data_json), "id": row.id, "date": row.created_at.isoformat()}

    def add_entry(
        self,
        collection: str,
        data: Dict[str, Any],
        created_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Ajoute une entrée à une collection (id et date attribués ici)."""
        if not collection:
            raise ContentValidationError("Nom de collection manquant.")
        if not isinstance(data, dict):
            raise ContentValidationError("Les données d'une entrée doivent être un objet.")
        payload = {k: v for k, v in data.items() if k not in ("id", "date")}
        with self.SessionLocal() as db:
            row = CollectionEntryDB(
                id=str(uuid.uuid4()), collection=collection, data_json=jd(payload),
                created_at=created_at or datetime.utcnow(),
            )
            db.add(row)
            db.commit()
            entry = self._entry(row)
        log.info("Entrée %s ajoutée à %s", entry["id"], collection)
        return entry

    def list_entries(
        self,
        collection: str,
        page: int = 1,
        limit: int = 10,
        sort_order: str = "desc",
    ) -> Dict[str, Any]:
        """
        Page d'entrées triées par date.
        Renvoie {entries: [...], pagination: {currentPage, totalPages, totalEntries, limit}}.
        """
        if sort_order not in ("asc", "desc"):
            raise ContentValidationError(f"Ordre de tri invalide : {sort_order} (asc | desc)")
        if page < 1 or limit < 1:
            raise ContentValidationError("page et limit doivent être ≥ 1")
        limit = min(limit, MAX_PAGE_SIZE)

        order = (
            [CollectionEntryDB.created_at.desc(), CollectionEntryDB.id.desc()]
            if sort_order == "desc"
            else [CollectionEntryDB.created_at.asc(), CollectionEntryDB.id.asc()]
        )
        with self.SessionLocal() as db:
            q = db.query(CollectionEntryDB).filter(CollectionEntryDB.collection == collection)
            total = q.count()
            rows = q.order_by(*order).offset((page - 1) * limit).limit(limit).all()
            entries = [self._entry(r) for r in rows]
        return {
            "entries": entries,
            "pagination": {
                "currentPage": page,
                "totalPages": max(1, math.ceil(total / limit)),
                "totalEntries": total,
                "limit": limit,
            },
        }

    def get_entry(self, collection: str, entry_id: str) -> Dict[str, Any]:
        with self.SessionLocal() as db:
            row = db.get(CollectionEntryDB, entry_id)
            if row is None or row.collection != collection:
                raise NotFound(f"{collection}/{entry_id}")
            return self._entry(row)


def init_store(store: SqlContentStore) -> None:
    """Page d'accueil créée au premier démarrage."""
    try:
        store.load(HOME_PATH)
    except NotFound:
        store.seed(HOME_PATH, "Accueil")
        log.info("Page d'accueil initialisée")


_store: Optional[SqlContentStore] = None


def get_store() -> SqlContentStore:
    """Dépendance FastAPI : store SQLite partagé (DB_PATH), créé au premier appel."""
    global _store
    if _store is None:
        _store = SqlContentStore()
        init_store(_store)
    return _store
