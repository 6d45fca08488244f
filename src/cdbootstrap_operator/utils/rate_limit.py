"""Rate limiting utilities for API calls."""

from __future__ import annotations

import os
import threading
import time
from functools import wraps
from typing import Any, Callable, TypeVar

from .. import metrics

_F = TypeVar("_F", bound=Callable[..., Any])

# Rate limit configuration
_K8S_RATE_LIMIT_PER_SECOND = float(os.getenv("K8S_RATE_LIMIT_PER_SECOND", "10.0"))
_VAULT_RATE_LIMIT_PER_SECOND = float(os.getenv("VAULT_RATE_LIMIT_PER_SECOND", "5.0"))


class _Pacer:
    """Spaces calls at least ``1 / per_second`` seconds apart.

    Each caller reserves its slot under the lock and sleeps outside of it.
    """

    def __init__(self, api_type: str, per_second: float):
        self.api_type = api_type
        self.min_interval = 1.0 / per_second if per_second > 0 else 0.0
        self._next_slot = 0.0
        self._lock = threading.Lock()

    def reserve(self) -> float:
        """Reserve the next call slot and return how long to wait for it."""
        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_slot)
            self._next_slot = slot + self.min_interval
        return slot - now

    def wait(self) -> None:
        delay = self.reserve()
        if delay > 0:
            metrics.rate_limit_hits_total.labels(api_type=self.api_type).inc()
            time.sleep(delay)


_k8s_pacer = _Pacer("k8s", _K8S_RATE_LIMIT_PER_SECOND)
_vault_pacer = _Pacer("vault", _VAULT_RATE_LIMIT_PER_SECOND)


def _rate_limited(pacer: _Pacer, func: _F) -> _F:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        pacer.wait()
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def rate_limit_k8s(func: _F) -> _F:
    """Decorator to rate limit Kubernetes API calls."""
    return _rate_limited(_k8s_pacer, func)


def rate_limit_vault(func: _F) -> _F:
    """Decorator to rate limit key vault calls."""
    return _rate_limited(_vault_pacer, func)
