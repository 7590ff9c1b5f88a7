"""FastAPI dependencies for the Creamery Units API.

Provides:
- The unit catalogue registry (built once per process)
- A conversion engine bound to that registry
"""

from functools import lru_cache

from fastapi import Depends

from .services.unit_catalogue import CategoryRegistry, load_registry
from .services.unit_conversion import ConversionEngine
from .settings import settings


@lru_cache(maxsize=1)
def get_registry() -> CategoryRegistry:
    """Load the catalogue on first use and share it read-only afterwards.

    Source: settings.catalogue_path if set, otherwise the built-in table.

    Raises:
        CatalogueError if the catalogue is unreadable or inconsistent
    """
    return load_registry(settings.catalogue_path)


def get_engine(registry: CategoryRegistry = Depends(get_registry)) -> ConversionEngine:
    return ConversionEngine(registry)
