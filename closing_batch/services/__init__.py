"""Services for closing runs."""

from closing_batch.services.catalog_service import CatalogService
from closing_batch.services.executor import BatchExecutor

__all__ = ["BatchExecutor", "CatalogService"]
