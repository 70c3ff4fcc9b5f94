"""
In-memory sliding-window rate limiting per key (per client IP).
Guards POST /token against password guessing.
"""
import math
import threading
import time

_store: dict[str, list[float]] = {}
_lock = threading.Lock()
_WINDOW_SECONDS = 60


def check_and_consume(
    key: str,
    limit: int,
    window_seconds: int = _WINDOW_SECONDS,
) -> tuple[bool, int | None]:
    """
    Record one hit for key if it is under limit within the window.
    Returns (allowed, retry_after_seconds); retry_after is >= 1 when refused.
    """
    if limit <= 0:
        return True, None
    now = time.monotonic()
    with _lock:
        hits = [t for t in _store.get(key, []) if t > now - window_seconds]
        if len(hits) >= limit:
            _store[key] = hits
            return False, max(1, math.ceil(window_seconds - (now - min(hits))))
        hits.append(now)
        _store[key] = hits
        return True, None


def reset() -> None:
    with _lock:
        _store.clear()
