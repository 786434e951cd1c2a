import uuid

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON

from database import Base
from utils.shared_utils import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class Project(Base):
    """
    Portfolio project shown on the public home page.
    `images` keeps insertion order; the first entry is the cover image.
    """
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    markdown = Column(Text, nullable=False)
    images = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)


class Page(Base):
    """
    Static content page addressed publicly by its slug.
    """
    __tablename__ = "pages"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(Text, nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    content = Column(Text, nullable=False)
    published = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, nullable=False)


class Setting(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(255), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False)


class User(Base):
    """
    Stored user account. Login uses the configured admin identity instead;
    this table exists for completeness of the data model.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)


class AdminSession(Base):
    """
    Server-side session record referenced by the signed session cookie.
    """
    __tablename__ = "admin_sessions"

    token = Column(String(64), primary_key=True)
    username = Column(String(255), nullable=False)
    is_authenticated = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
