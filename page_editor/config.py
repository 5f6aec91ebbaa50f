"""
Configuration par variables d'environnement.

Lues à l'appel (pas à l'import) : les tests peuvent les surcharger avec
monkeypatch.setenv sans recharger les modules.

DB_PATH               chemin du fichier SQLite           (défaut : data/page_editor.db)
UPLOADS_DIR           dossier des images uploadées       (défaut : data/uploads)
PUBLIC_UPLOADS_PREFIX préfixe public des uploads         (défaut : /uploads)
CONTENT_API_URL       API de contenu distante (HttpContentStore)
HTTP_TIMEOUT          timeout des appels HTTP, secondes  (défaut : 10)
"""
import os
from pathlib import Path
from typing import Optional

DATA_DIR = Path(__file__).parent.parent / "data"


def db_path() -> str:
    return os.getenv("DB_PATH", str(DATA_DIR / "page_editor.db"))


def db_url() -> str:
    return f"sqlite:///{db_path()}"


def uploads_dir() -> Path:
    d = Path(os.getenv("UPLOADS_DIR", str(DATA_DIR / "uploads")))
    d.mkdir(parents=True, exist_ok=True)
    return d


def public_uploads_prefix() -> str:
    return os.getenv("PUBLIC_UPLOADS_PREFIX", "/uploads").rstrip("/")


def content_api_url() -> Optional[str]:
    url = os.getenv("CONTENT_API_URL", "").strip()
    return url.rstrip("/") or None


def http_timeout() -> float:
    return float(os.getenv("HTTP_TIMEOUT", "10"))
