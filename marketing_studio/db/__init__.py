"""Relational record store: users, generation history and brand assets."""

from marketing_studio.db.base import Base, get_engine, get_session, init_db, make_engine
from marketing_studio.db.models import BrandAsset, GenerationHistory, User
from marketing_studio.db.repositories import BrandAssetsRepository, HistoryRepository, UsersRepository

__all__ = [
    "Base",
    "BrandAsset",
    "BrandAssetsRepository",
    "GenerationHistory",
    "HistoryRepository",
    "User",
    "UsersRepository",
    "get_engine",
    "get_session",
    "init_db",
    "make_engine",
]
