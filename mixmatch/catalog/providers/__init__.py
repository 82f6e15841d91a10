from mixmatch.catalog.providers.base import CatalogStore
from mixmatch.catalog.providers.in_memory import InMemoryCatalogStore
from mixmatch.catalog.providers.sql import SqlCatalogStore

__all__ = ["CatalogStore", "InMemoryCatalogStore", "SqlCatalogStore"]
