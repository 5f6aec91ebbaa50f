"""
Page Editor: API de contenu (FastAPI)
Démarrer : uvicorn page_editor.api.main:app --reload --port 8001
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .. import __version__, config
from .routes import content, upload

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="Page Editor: API de contenu", version=__version__, docs_url="/docs")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.on_event("startup")
def startup():
    from ..services.sql_store import get_store
    get_store()
    log.info("DB initialisée (SQLite) : %s", config.db_path())

    prefix = config.public_uploads_prefix()
    try:
        app.mount(prefix, StaticFiles(directory=str(config.uploads_dir())), name="uploads")
        log.info("Static uploads monté sur %s", prefix)
    except (OSError, RuntimeError) as e:
        log.warning("Impossible de monter %s : %s", prefix, e)


@app.get("/health")
def health():
    return {"status": "ok", "service": "page_editor", "version": __version__}


app.include_router(content.router)
app.include_router(upload.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("page_editor.api.main:app", host="127.0.0.1", port=8001, reload=True)
