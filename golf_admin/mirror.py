"""Local mirror of a remote collection.

The mirror never computes post-mutation state itself: every successful write
is followed by a full reload from the store. A failed write leaves the mirror
object untouched.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Generic, Optional, TypeVar

from golf_admin.errors import ControllerBusy, LoadError, MutationError, StoreError
from golf_admin.notifications import Confirm, Notifier
from golf_admin.store import StoreResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")
Fetch = Callable[[], StoreResponse]
Operation = Callable[[], StoreResponse]


class SyncState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    BUSY = "busy"


def _unwrap(response: StoreResponse) -> list:
    if response.error is not None:
        raise response.error
    return list(response.data or [])


class Mirror(Generic[T]):
    def __init__(
        self,
        fetch: Fetch,
        notifier: Notifier,
        *,
        convert: Optional[Callable[[dict], T]] = None,
        load_failure: str = "Failed to load records",
    ):
        self._fetch = fetch
        self._convert = convert
        self.notifier = notifier
        self.load_failure = load_failure
        self.items: list[T] = []
        self.loading = False
        self.busy = False

    @property
    def state(self) -> SyncState:
        if self.busy:
            return SyncState.BUSY
        if self.loading:
            return SyncState.LOADING
        return SyncState.IDLE

    def reload(self) -> list[T]:
        self.loading = True
        try:
            rows = _unwrap(self._fetch())
        except StoreError as exc:
            logger.warning("%s: %s", self.load_failure, exc.message)
            self.notifier.error(self.load_failure)
            raise LoadError(exc.message) from exc
        finally:
            self.loading = False
        self.items = [self._convert(row) for row in rows] if self._convert else rows
        return self.items

    def mutate(
        self,
        operation: Operation,
        failure: str,
        *,
        confirm: Optional[Confirm] = None,
        prompt: Optional[str] = None,
    ) -> bool:
        """Run one remote write and reload on success.

        Returns ``False`` when a confirmation ``prompt`` was declined, in which
        case nothing was sent to the store.
        """
        if self.busy:
            raise ControllerBusy("Another change is still in progress")
        if prompt is not None and (confirm is None or not confirm(prompt)):
            return False

        self.busy = True
        try:
            try:
                _unwrap(operation())
            except StoreError as exc:
                logger.warning("%s: %s", failure, exc.message)
                self.notifier.error(f"{failure}: {exc.message}")
                raise MutationError(exc.message) from exc
            self.reload()
        finally:
            self.busy = False
        return True
