"""Cache entry model, lookup results, key derivation and TTL resolution.

All expiration instants are ``time.monotonic()`` readings in seconds so that
wall-clock adjustments never expire or resurrect entries.
"""

import hashlib
import json
import math
from dataclasses import dataclass
from typing import Any, Optional, Union

# Marker for entries that never expire
NEVER = "never"

DEFAULT_NAMESPACE = "recall"

_NEVER_ALIASES = (NEVER, "infinity")

# TTLs beyond this (about 285 000 years) are treated as never expiring
MAX_TTL_MS = 2 ** 53

TTL = Union[int, float, str, None]


@dataclass(frozen=True)
class CacheEntry:
    """A stored value plus its expiration instant (None = never expires)."""
    value: Any
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        """True once the expiration instant is strictly in the past."""
        return self.expires_at is not None and self.expires_at < now

    def is_sweepable(self, now: float) -> bool:
        """True when the sweeper may remove the entry (expiry at or before now)."""
        return self.expires_at is not None and self.expires_at <= now


@dataclass(frozen=True)
class CacheResult:
    """Outcome of a lookup: either found with a value, or not found.

    A stored ``None`` is still a hit, so callers check ``found`` rather than
    the value.
    """
    found: bool
    value: Any = None

    @classmethod
    def hit(cls, value: Any) -> "CacheResult":
        return cls(found=True, value=value)

    @classmethod
    def miss(cls) -> "CacheResult":
        return _MISS


_MISS = CacheResult(found=False)


def is_never(ttl: Any) -> bool:
    """Check whether a TTL value is one of the never-expire markers."""
    if isinstance(ttl, str):
        return ttl.strip().lower() in _NEVER_ALIASES
    if isinstance(ttl, float):
        return math.isinf(ttl) and ttl > 0
    return False


def resolve_ttl(ttl: TTL, default_ttl: Union[int, str]) -> Optional[int]:
    """Resolve a per-call TTL to milliseconds, or None for never.

    Never markers disable expiration, positive integers are used as-is, and
    anything else (unspecified, zero, negative, bool, float, garbage) falls back
    to the engine default. An invalid TTL is never an error. Durations above
    MAX_TTL_MS resolve to never.
    """
    if is_never(ttl):
        return None
    if isinstance(ttl, int) and not isinstance(ttl, bool) and ttl > 0:
        return ttl if ttl <= MAX_TTL_MS else None
    if is_never(default_ttl):
        return None
    default_ms = int(default_ttl)
    return default_ms if default_ms <= MAX_TTL_MS else None


def expires_at_for(ttl_ms: Optional[int], now: float) -> Optional[float]:
    """Convert a resolved TTL into a monotonic expiration instant."""
    if ttl_ms is None or ttl_ms > MAX_TTL_MS:
        return None
    return now + ttl_ms / 1000


def _canonical(term: Any) -> Any:
    """Reduce a term to a JSON-encodable form that keeps container types distinct."""
    if term is None or isinstance(term, (bool, str)):
        return term
    if isinstance(term, (int, float)):
        # bool is handled above
        return {"__num__": repr(term)}
    if isinstance(term, tuple):
        return {"__tuple__": [_canonical(t) for t in term]}
    if isinstance(term, list):
        return {"__list__": [_canonical(t) for t in term]}
    if isinstance(term, (set, frozenset)):
        items = sorted(json.dumps(_canonical(t), sort_keys=True) for t in term)
        return {"__set__": items}
    if isinstance(term, dict):
        items = sorted(
            (json.dumps(_canonical(k), sort_keys=True), _canonical(v))
            for k, v in term.items()
        )
        return {"__dict__": [[k, v] for k, v in items]}
    if isinstance(term, bytes):
        return {"__bytes__": term.hex()}
    return {"__obj__": f"{type(term).__module__}.{type(term).__qualname__}", "repr": repr(term)}


def build_cache_key(term: Any, name: Any = DEFAULT_NAMESPACE) -> str:
    """Derive the cache key for a caller-supplied term within a namespace.

    Format: {name}:{sha256(canonical term)[:32]}

    Equal (name, term) pairs always produce the same key, in every process.
    """
    namespace = DEFAULT_NAMESPACE if name is None else str(name)
    canonical = json.dumps(_canonical(term), sort_keys=True, separators=(",", ":"))
    digest = hashlib.sha256(f"{namespace}\x00{canonical}".encode()).hexdigest()[:32]
    return f"{namespace}:{digest}"
