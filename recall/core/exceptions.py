"""Cache engine exception hierarchy."""


class CacheError(Exception):
    """Base exception for all cache engine errors."""


class AdapterStartupError(CacheError):
    """The configured storage backend could not be started."""

    def __init__(self, adapter_name: str, message: str):
        self.adapter_name = adapter_name
        super().__init__(f"[{adapter_name}] {message}")


class EngineNotStartedError(CacheError):
    """An operation needed a running engine but startup() has not completed."""
