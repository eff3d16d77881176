"""Cached collections kept in step with the remote service."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Generic, Iterator, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel

from .errors import RemoteError
from .normalize import normalize_collection
from .notifications import NotificationCenter
from .remote import RemoteService

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

Confirm = Callable[[str], bool]


class LoadingTracker:
    """Busy indicator shared by every store.

    Each fetch holds one reference, so the indicator stays on until the last
    outstanding fetch finishes.
    """

    def __init__(self) -> None:
        self._pending = 0

    @property
    def pending(self) -> int:
        return self._pending

    @property
    def active(self) -> bool:
        return self._pending > 0

    @contextmanager
    def track(self) -> Iterator[None]:
        self._pending += 1
        try:
            yield
        finally:
            self._pending -= 1


class ResourceStore(Generic[T]):
    """Cache plus create/update/delete orchestration for one collection.

    Every successful mutation is followed by a full :meth:`list` instead of a
    local patch. Failed calls leave the cache exactly as it was. Remote errors
    are logged and shown as error notifications; they are never raised to the
    caller, who only sees a falsy return value.

    The cache belongs to a *generation* that :meth:`clear` advances. A call
    that started in an earlier generation drops its completion side effects
    (cache writes, notifications, refreshes) when it resolves, so a slow
    response cannot repopulate a store that was cleared at logout.
    """

    def __init__(
        self,
        resource: str,
        model: Type[T],
        remote: RemoteService,
        notifications: NotificationCenter,
        loading: Optional[LoadingTracker] = None,
        envelope: Optional[str] = None,
        label: Optional[str] = None,
        plural: Optional[str] = None,
    ) -> None:
        self.resource = resource
        self.model = model
        self.envelope = envelope or resource
        self.label = label or model.__name__.lower()
        self.plural = plural or f"{self.label}s"
        self._remote = remote
        self._notifications = notifications
        self._loading = loading if loading is not None else LoadingTracker()
        self._items: Tuple[T, ...] = ()
        self._generation = 0

    @property
    def items(self) -> Tuple[T, ...]:
        """Read-only snapshot of the cached collection."""
        return self._items

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> LoadingTracker:
        return self._loading

    def __len__(self) -> int:
        return len(self._items)

    def get(self, entity_id: Any) -> Optional[T]:
        for item in self._items:
            if getattr(item, "id", None) == entity_id:
                return item
        return None

    def clear(self) -> None:
        """Empty the cache and orphan every call still in flight."""
        self._items = ()
        self._generation += 1

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    async def list(self) -> Optional[List[T]]:
        """Fetch the whole collection and replace the cache with it.

        Returns the new items, or ``None`` when the call failed or its result
        was discarded as stale.
        """

        generation = self._generation
        with self._loading.track():
            try:
                payload = await self._remote.fetch_collection(self.resource)
            except RemoteError as exc:
                logger.error("failed to load %s", self.plural, exc_info=exc)
                if not self._is_stale(generation):
                    self._notifications.error(f"Failed to load {self.plural}")
                return None
        items = normalize_collection(payload, self.model, self.envelope)
        if self._is_stale(generation):
            logger.info("discarding stale %s list", self.plural)
            return None
        self._items = tuple(items)
        logger.info("loaded %d %s", len(items), self.plural)
        return items

    async def create(
        self,
        payload: Mapping[str, Any],
        *,
        refresh: bool = True,
        success_message: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> bool:
        """Submit a new entity; ``refresh`` re-lists the collection on success."""

        generation = self._generation
        try:
            await self._remote.create(self.resource, dict(payload))
        except RemoteError as exc:
            logger.error("failed to create %s", self.label, exc_info=exc)
            if not self._is_stale(generation):
                self._notifications.error(error_message or f"Failed to create {self.label}")
            return False
        if self._is_stale(generation):
            return True
        self._notifications.success(success_message or f"{self.label.capitalize()} created")
        if refresh:
            await self.list()
        return True

    async def update(self, entity_id: Any, payload: Mapping[str, Any]) -> bool:
        """Replace the record ``entity_id`` with ``payload``."""

        generation = self._generation
        try:
            await self._remote.replace(self.resource, entity_id, dict(payload))
        except RemoteError as exc:
            logger.error("failed to update %s %s", self.label, entity_id, exc_info=exc)
            if not self._is_stale(generation):
                self._notifications.error(f"Failed to update {self.label}")
            return False
        if self._is_stale(generation):
            return True
        self._notifications.success(f"{self.label.capitalize()} updated")
        await self.list()
        return True

    async def delete(self, entity_id: Any, confirm: Confirm) -> bool:
        """Delete ``entity_id`` once ``confirm`` approves.

        A declined confirmation sends nothing and shows nothing.
        """

        if not confirm(f"Are you sure you want to delete this {self.label}?"):
            logger.info("delete of %s %s declined", self.label, entity_id)
            return False
        generation = self._generation
        try:
            await self._remote.delete(self.resource, entity_id)
        except RemoteError as exc:
            logger.error("failed to delete %s %s", self.label, entity_id, exc_info=exc)
            if not self._is_stale(generation):
                self._notifications.error(f"Failed to delete {self.label}")
            return False
        if self._is_stale(generation):
            return True
        self._notifications.success(f"{self.label.capitalize()} deleted")
        await self.list()
        return True
