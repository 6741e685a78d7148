from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from ._errors import ResolutionError, qualified_name


if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterator


logger = logging.getLogger(__name__)


class _Pending:
    """An in-flight construction other callers can wait on."""

    __slots__ = ("done", "error", "owner")

    def __init__(self) -> None:
        self.owner = threading.get_ident()
        self.done = threading.Event()
        self.error: BaseException | None = None


class InstanceStore:
    """Write-once memoization of one instance per key.

    `get_or_create` builds each key at most once at a time: the first caller
    for a missing key runs the build, concurrent callers for the same key wait
    on it, and callers for other keys proceed independently. The shared guard
    only covers bookkeeping, never a build.

    A failed build stores nothing. Callers already waiting on it get the same
    exception, later callers start a new build. A build that asks for its own
    key again raises ResolutionError instead of waiting on itself.
    """

    def __init__(self) -> None:
        self._values: dict[Hashable, Any] = {}
        self._pending: dict[Hashable, _Pending] = {}
        self._guard = threading.Lock()

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._values.get(key, default)

    def get_or_create(self, key: Hashable, build: Callable[[], Any]) -> Any:
        value = self._values.get(key)
        if value is not None:
            return value

        with self._guard:
            value = self._values.get(key)
            if value is not None:
                return value
            pending = self._pending.get(key)
            owner = pending is None
            if owner:
                pending = self._pending[key] = _Pending()

        if not owner:
            return self._wait(key, pending)

        try:
            value = build()
        except BaseException as exc:
            pending.error = exc
            raise
        else:
            if value is not None:
                with self._guard:
                    self._values[key] = value
            return value
        finally:
            with self._guard:
                del self._pending[key]
            pending.done.set()

    def _wait(self, key: Hashable, pending: _Pending) -> Any:
        if pending.owner == threading.get_ident():
            msg = f"Recursive construction of {qualified_name(key)} on the thread already building it"
            raise ResolutionError(msg)
        logger.debug("Waiting on in-flight construction of %r", key)
        pending.done.wait()
        if pending.error is not None:
            raise pending.error
        return self._values.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def keys(self) -> Iterator[Hashable]:
        with self._guard:
            return iter(list(self._values))
