from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, List

_registry_guard = threading.Lock()
# key -> [lock, holders]
_order_locks: Dict[str, List] = {}


@contextmanager
def order_lock(order_id):
    """Serialize guard-and-write sequences for one order within this process.

    Cross-process races are caught by the order row's version counter.
    """
    key = str(order_id)
    with _registry_guard:
        entry = _order_locks.setdefault(key, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _registry_guard:
            entry[1] -= 1
            if entry[1] <= 0:
                _order_locks.pop(key, None)


def held_lock_count() -> int:
    with _registry_guard:
        return len(_order_locks)
