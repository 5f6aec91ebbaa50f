"""
Collaborateurs HTTP : ContentStore / AssetStore adossés à l'API de contenu
(routes /api/get-content, /api/save-content, /api/list-content,
/api/create-content, /api/delete-content, /api/list-collection-entries,
/api/get-collection-entry, /api/upload-image).

Statuts :
  transport / 5xx → NetworkError
  404             → NotFound
  autre 4xx       → ContentValidationError
"""
import logging
from typing import Any, Dict, List, Optional

import requests as http

from .. import config
from ..core.errors import ContentValidationError, NetworkError, NotFound
from .assets import read_upload
from .base import UploadFile

log = logging.getLogger(__name__)


def _detail(resp) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("message") or body)
    return str(body)


class _HttpClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        base_url = base_url or config.content_api_url()
        if not base_url:
            raise ValueError("CONTENT_API_URL manquant")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else config.http_timeout()

    def _request(self, method: str, route: str, pathname: Optional[str] = None, **kwargs) -> Any:
        url = f"{self.base_url}{route}"
        try:
            resp = http.request(method, url, timeout=self.timeout, **kwargs)
        except http.RequestException as e:
            log.error("%s %s : %s", method, url, e)
            raise NetworkError(f"Service de contenu injoignable : {e}") from e

        if resp.status_code == 404 and pathname is not None:
            raise NotFound(pathname)
        if 400 <= resp.status_code < 500:
            raise ContentValidationError(_detail(resp))
        if resp.status_code >= 400:
            log.error("%s %s → %s : %s", method, url, resp.status_code, resp.text[:200])
            raise NetworkError(_detail(resp), status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise ContentValidationError(f"Réponse non JSON ({route})") from e


class HttpContentStore(_HttpClient):
    """ContentStore distant (CONTENT_API_URL, HTTP_TIMEOUT)."""

    def load(self, pathname: str) -> Dict[str, Any]:
        body = self._request("GET", "/api/get-content", pathname, params={"pathname": pathname})
        if not isinstance(body, dict) or "tree" not in body or "schema" not in body:
            raise ContentValidationError("Réponse de chargement sans `tree` ni `schema`")
        return body

    def save(self, pathname: str, tree: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/save-content", pathname,
                             json={"pathname": pathname, "content": tree})

    def list(self) -> List[Dict[str, Any]]:
        body = self._request("GET", "/api/list-content")
        if not isinstance(body, list):
            raise ContentValidationError("Liste de contenus attendue")
        return body

    def create(self, name: str, type_id: str) -> Dict[str, Any]:
        return self._request("POST", "/api/create-content", json={"name": name, "type": type_id})

    def delete(self, pathname: str) -> Dict[str, Any]:
        return self._request("POST", "/api/delete-content", pathname, json={"pathname": pathname})

    def list_entries(self, collection: str, page: int = 1, limit: int = 10,
                     sort_order: str = "desc") -> Dict[str, Any]:
        body = self._request("GET", "/api/list-collection-entries", params={
            "collection": collection, "page": page, "limit": limit, "sortOrder": sort_order,
        })
        if not isinstance(body, dict) or not isinstance(body.get("entries"), list):
            raise ContentValidationError("Réponse de collection sans `entries`")
        return body

    def get_entry(self, collection: str, entry_id: str) -> Dict[str, Any]:
        return self._request("GET", "/api/get-collection-entry", f"{collection}/{entry_id}",
                             params={"id": entry_id, "collection": collection})


class HttpAssetStore(_HttpClient):
    """AssetStore distant : multipart `file` sur /api/upload-image."""

    def upload(self, file: UploadFile) -> Dict[str, Any]:
        name, data = read_upload(file)
        body = self._request("POST", "/api/upload-image", files={"file": (name, data)})
        if not isinstance(body, dict) or not body.get("filePath"):
            raise ContentValidationError("Réponse d'upload sans `filePath`")
        return body
