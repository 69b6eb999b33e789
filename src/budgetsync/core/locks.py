"""Per-user advisory locks for request serialization within one process."""

import asyncio
import weakref


class UserLockRegistry:
    """Hands out one ``asyncio.Lock`` per (namespace, user) pair.

    Sync calls and category writes use separate namespaces. Locks are held
    weakly: once no caller references a lock it is dropped, so the registry
    only holds locks that are in use.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def __len__(self) -> int:
        return len(self._locks)

    def get(self, namespace: str, user_id: str) -> asyncio.Lock:
        key = (namespace, user_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def sync_lock(self, user_id: str) -> asyncio.Lock:
        return self.get("sync", user_id)

    def category_lock(self, user_id: str) -> asyncio.Lock:
        return self.get("categories", user_id)
