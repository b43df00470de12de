from .client import CacheClient
from .engine import CacheEngine

__all__ = ["CacheClient", "CacheEngine"]
