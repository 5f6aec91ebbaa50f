"""
API de contenu
Routes :
  GET  /api/get-content?pathname=
  POST /api/save-content     {pathname, content}
  GET  /api/list-content
  POST /api/create-content   {name, type}
  POST /api/delete-content   {pathname}
  GET  /api/list-collection-entries?collection=&page=&limit=&sortOrder=
  GET  /api/get-collection-entry?id=&collection=
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ...core.errors import ContentValidationError, NotFound
from ...services.sql_store import SqlContentStore, get_store

log = logging.getLogger(__name__)

router = APIRouter(tags=["Contenu"])


class SaveBody(BaseModel):
    pathname: str
    content: Dict[str, Any]


class CreateBody(BaseModel):
    name: str
    type: str


class DeleteBody(BaseModel):
    pathname: str


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, NotFound):
        return HTTPException(404, str(e))
    return HTTPException(400, str(e))


@router.get("/api/get-content")
def get_content(pathname: str = Query(...), store: SqlContentStore = Depends(get_store)):
    try:
        return store.load(pathname)
    except NotFound as e:
        raise _http_error(e)


@router.post("/api/save-content")
def save_content(body: SaveBody, store: SqlContentStore = Depends(get_store)):
    try:
        return store.save(body.pathname, body.content)
    except (NotFound, ContentValidationError) as e:
        log.warning("save-content %s refusé : %s", body.pathname, e)
        raise _http_error(e)


@router.get("/api/list-content")
def list_content(store: SqlContentStore = Depends(get_store)):
    return store.list()


@router.post("/api/create-content")
def create_content(body: CreateBody, store: SqlContentStore = Depends(get_store)):
    try:
        return store.create(body.name, body.type)
    except ContentValidationError as e:
        raise _http_error(e)


@router.post("/api/delete-content")
def delete_content(body: DeleteBody, store: SqlContentStore = Depends(get_store)):
    try:
        return store.delete(body.pathname)
    except (NotFound, ContentValidationError) as e:
        raise _http_error(e)


# ── Collections ─────────────────────────────────────────────────────────────

@router.get("/api/list-collection-entries")
def list_collection_entries(
    collection: str = Query(...),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    sortOrder: str = Query("desc"),
    store: SqlContentStore = Depends(get_store),
):
    try:
        return store.list_entries(collection, page=page, limit=limit, sort_order=sortOrder)
    except ContentValidationError as e:
        raise _http_error(e)


@router.get("/api/get-collection-entry")
def get_collection_entry(
    id: str = Query(...),
    collection: str = Query(...),
    store: SqlContentStore = Depends(get_store),
):
    try:
        return store.get_entry(collection, id)
    except NotFound as e:
        raise _http_error(e)
