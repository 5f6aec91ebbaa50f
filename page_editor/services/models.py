"""
Modèles ORM
  ContentDB          : contenus éditables (pages, articles…), un pathname public
                       + son arbre + son schéma, en JSON
  CollectionEntryDB  : entrées de collection consultées dans le navigateur
"""
import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ContentDB(Base):
    __tablename__ = "contents"
    path:         Mapped[str]      = mapped_column(sa.String, primary_key=True)
    content_type: Mapped[str]      = mapped_column(sa.String, nullable=False, default="pages", index=True)
    name:         Mapped[str]      = mapped_column(sa.String, nullable=False)
    tree_json:    Mapped[str]      = mapped_column(sa.Text, nullable=False, default="{}")
    schema_json:  Mapped[str]      = mapped_column(sa.Text, nullable=False, default="{}")
    created_at:   Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow)
    updated_at:   Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class CollectionEntryDB(Base):
    """Entrée de collection (formulaires, inscriptions…) : données libres en JSON."""
    __tablename__ = "collection_entries"
    id:         Mapped[str]      = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    collection: Mapped[str]      = mapped_column(sa.String, nullable=False, index=True)
    data_json:  Mapped[str]      = mapped_column(sa.Text, nullable=False, default="{}")
    created_at: Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow, index=True)
