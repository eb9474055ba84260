"""Infrastructure adapters: database engine and the local data gateway."""

from .database import bootstrap_database, create_db_engine, create_session_factory, init_database
from .gateway import SQLModelGateway, seed_default_categories

__all__ = [
    "SQLModelGateway",
    "bootstrap_database",
    "create_db_engine",
    "create_session_factory",
    "init_database",
    "seed_default_categories",
]
