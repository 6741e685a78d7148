from __future__ import annotations

import inspect
import logging
import typing
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, cast

from ._errors import InstantiationFailure, NoSuchConstructor


if TYPE_CHECKING:
    from collections.abc import Callable

    T = TypeVar("T")


logger = logging.getLogger(__name__)


def constructor_for(tp: type[T]) -> Callable[[], T]:
    """Return the zero-argument constructor capability of `tp`.

    A class qualifies when it is concrete and its signature binds with no
    arguments. Anything else raises NoSuchConstructor.
    """
    if not inspect.isclass(tp) or inspect.isabstract(tp) or _is_protocol(tp):
        raise NoSuchConstructor(tp)

    try:
        sig = inspect.signature(tp)
    except (TypeError, ValueError):
        # some extension types expose no signature; let the call decide
        logger.debug("No signature available for %r, trying a bare call", tp)
        return tp

    try:
        sig.bind()
    except TypeError as e:
        raise NoSuchConstructor(tp) from e
    return tp


def instantiate(tp: type[T], factory: Callable[[], Any]) -> T:
    try:
        instance = factory()
    except Exception as e:
        logger.debug("Construction of %r failed: %s", tp, e)
        raise InstantiationFailure(tp) from e
    return cast("T", instance)


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def _is_protocol(tp: type) -> bool:
        return typing.is_protocol(tp)

else:

    def _is_protocol(tp: type) -> bool:
        return Protocol in getattr(tp, "__mro__", ()) and bool(tp.__dict__.get("_is_protocol", False))
