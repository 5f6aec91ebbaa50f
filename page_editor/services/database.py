"""SQLite: moteur + fabrique de sessions + helpers JSON"""
import json
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from .. import config
from .models import Base


def create_session_factory(db_url: Optional[str] = None) -> sessionmaker:
    """Crée le moteur (tables incluses) et renvoie la fabrique de sessions."""
    url = db_url or config.db_url()
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if url.startswith("sqlite:///") and url != "sqlite:///:memory:":
            Path(url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(url, connect_args=connect_args)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ── JSON helpers ──
def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)


def jo(s: Optional[str]) -> dict:
    value = json.loads(s or "{}")
    return value if isinstance(value, dict) else {}
