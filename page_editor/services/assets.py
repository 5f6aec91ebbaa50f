"""
AssetStore local : images écrites dans UPLOADS_DIR, servies sous /uploads.
"""
import logging
import os
import re
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .. import config
from ..core.errors import ContentValidationError, NetworkError
from .base import UploadFile

log = logging.getLogger(__name__)

ALLOWED_EXT = {"png", "jpg", "jpeg", "gif", "webp", "svg"}


def read_upload(file: UploadFile) -> Tuple[str, bytes]:
    """(nom, contenu) d'un fichier : paire (nom, octets) ou objet binaire avec .name."""
    if isinstance(file, tuple):
        name, data = file
        return str(name), bytes(data)
    name = os.path.basename(getattr(file, "filename", None) or getattr(file, "name", "") or "")
    return name, file.read()


def safe_name(filename: str) -> str:
    """Nom de fichier sûr et unique : <hex8>-<base>.<ext> ; extension hors liste → erreur."""
    base, _, ext = Path(filename).name.rpartition(".")
    ext = ext.lower()
    if not base or ext not in ALLOWED_EXT:
        raise ContentValidationError(
            f"Extension non autorisée : {filename or '<sans nom>'} (acceptées : {', '.join(sorted(ALLOWED_EXT))})"
        )
    base = re.sub(r"[^a-zA-Z0-9_-]+", "-", base).strip("-").lower() or "image"
    return f"{uuid.uuid4().hex[:8]}-{base}.{ext}"


class LocalAssetStore:
    """
    Args:
        uploads_dir: dossier de destination (UPLOADS_DIR par défaut)
        public_prefix: préfixe des chemins renvoyés (PUBLIC_UPLOADS_PREFIX, "/uploads")
    """

    def __init__(self, uploads_dir: Optional[Path] = None, public_prefix: Optional[str] = None):
        self.uploads_dir = Path(uploads_dir) if uploads_dir else config.uploads_dir()
        self.public_prefix = (public_prefix if public_prefix is not None else config.public_uploads_prefix()).rstrip("/")

    def upload(self, file: UploadFile) -> Dict[str, Any]:
        name, data = read_upload(file)
        if not data:
            raise ContentValidationError("Fichier vide")
        filename = safe_name(name)
        dest = self.uploads_dir / filename
        try:
            self.uploads_dir.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(data)
        except OSError as e:
            raise NetworkError(f"Écriture impossible : {e}") from e
        log.info("Image uploadée → %s (%d octets)", dest, len(data))
        return {"filePath": f"{self.public_prefix}/{filename}"}


_assets: Optional[LocalAssetStore] = None


def get_assets() -> LocalAssetStore:
    """Dépendance FastAPI : AssetStore local partagé."""
    global _assets
    if _assets is None:
        _assets = LocalAssetStore()
    return _assets
