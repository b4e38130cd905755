# backend/utils/locks.py
import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterable

_registry: Dict[Hashable, threading.Lock] = {}
_registry_lock = threading.Lock()


def _lock_for(key: Hashable) -> threading.Lock:
    with _registry_lock:
        lock = _registry.get(key)
        if lock is None:
            lock = _registry[key] = threading.Lock()
        return lock


@contextmanager
def hold(keys: Iterable[Hashable]):
    """Acquires one lock per key in sorted order and releases them on exit."""
    ordered = sorted(set(keys), key=repr)
    acquired = []
    try:
        for key in ordered:
            lock = _lock_for(key)
            lock.acquire()
            acquired.append(lock)
        yield
    finally:
        for lock in reversed(acquired):
            lock.release()


def checkout_keys(email: str, product_ids: Iterable[str]):
    return [("account", email)] + [("product", pid) for pid in product_ids]
