# storefront/core/store.py
"""
Async access to the (synchronous) SQLModel repositories.

Every repository call made by a service goes through `run_store_call`, which:
  - runs the call in a worker thread so the event loop is never blocked
  - bounds it with STORE_TIMEOUT_SECONDS
  - turns driver failures into StorageError and timeouts into StoreTimeoutError

`UserLocks` serializes cart mutations and checkout per user.
"""

import asyncio
import logging
import uuid
import weakref
from typing import Any, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from storefront.core.config import get_settings
from storefront.core.errors import StorageError, StoreTimeoutError

settings = get_settings()
logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_store_call(
    fn: Callable[..., T],
    *args: Any,
    timeout: float | None = None,
    **kwargs: Any,
) -> T:
    """
    Await a blocking repository call.

    A thread cannot be interrupted, so on timeout the call is still awaited
    to completion before StoreTimeoutError is raised. When it surfaces, the
    session is idle again and any commit the call made has either happened
    or not; callers may look the result up.

    Raises:
        StoreTimeoutError: the call did not finish within `timeout` seconds.
        StorageError: the database driver raised.
    """
    if timeout is None:
        timeout = settings.STORE_TIMEOUT_SECONDS

    name = getattr(fn, "__qualname__", repr(fn))
    worker = asyncio.ensure_future(asyncio.to_thread(fn, *args, **kwargs))
    try:
        return await asyncio.wait_for(asyncio.shield(worker), timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.warning(
            "Store call %s timed out after %.2fs, waiting for it to finish",
            name,
            timeout,
        )
        await asyncio.wait([worker])
        if not worker.cancelled() and worker.exception() is not None:
            logger.error("Store call %s failed after timeout: %s", name, worker.exception())
        raise StoreTimeoutError(f"Storage call timed out: {name}") from e
    except SQLAlchemyError as e:
        logger.error("Store call %s failed: %s", name, e)
        raise StorageError(f"Storage call failed: {name}") from e


class UserLocks:
    """
    One asyncio.Lock per user id.

    Locks live in a weak-value map: an entry disappears once no coroutine
    holds or waits on it, so the registry does not grow with the user base.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[uuid.UUID, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def for_user(self, user_id: uuid.UUID) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock
