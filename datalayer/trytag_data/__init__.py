"""Public package exports for the TryTag data layer."""

from .config import TryTagConfig, load_config
from .schema import models as schema_models
from .spawtz_api import FetchClient, FetchError, RateLimiter
from .store.sql_store import SqlStore
from .sync import DivisionNotFoundError, SyncOrchestrator, SyncResult, slugify

__all__ = [
    "DivisionNotFoundError",
    "FetchClient",
    "FetchError",
    "RateLimiter",
    "SqlStore",
    "SyncOrchestrator",
    "SyncResult",
    "TryTagConfig",
    "load_config",
    "schema_models",
    "slugify",
]
