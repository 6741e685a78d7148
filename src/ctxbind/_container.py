from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass
from functools import partial
from typing import (
    TYPE_CHECKING,
    TypeVar,
    cast,
    overload,
)

from ._constructor import _is_protocol, constructor_for, instantiate
from ._errors import NotFound, qualified_name
from ._registry import TypeRegistry
from ._store import InstanceStore


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    T = TypeVar("T")

    Token = type[T] | str


@dataclass(frozen=True)
class Binding:
    factory: Callable[[], object] | None
    instance: object | None = None  # pre-registered instance


class Container:
    """Lazy, thread-safe provider of one object per type.

    - `create` always constructs a fresh instance
    - `get` constructs once and returns the memoized instance afterwards
    - tokens are classes or names registered in the container's TypeRegistry
    - an optional delegate container is asked first; its explicit bindings
      override this container's own construction.
    """

    def __init__(self, delegate: Container | None = None, *, registry: TypeRegistry | None = None) -> None:
        if registry is None:
            registry = TypeRegistry(delegate.registry) if delegate is not None else TypeRegistry()
        self._delegate = delegate
        self._registry = registry
        self._bindings: dict[type, Binding] = {}
        self._store = InstanceStore()
        self._lock = threading.RLock()

    @property
    def delegate(self) -> Container | None:
        return self._delegate

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    def register(
        self,
        token: type[T],
        impl: type[T] | None = None,
        *,
        factory: Callable[[], T] | None = None,
        names: Iterable[str] = (),
    ) -> None:
        """Bind a class token to an implementation class or a zero-argument factory.

        Example:
          container.register(Repository, SqlRepository)
          container.register(Settings, factory=Settings.from_defaults, names=["settings"])

        """
        if impl is not None and factory is not None:
            msg = "Provide either `impl` or `factory`, not both."
            raise ValueError(msg)

        self._check_token(token)
        if factory is None:
            impl = token if impl is None else impl
            if not _is_protocol(token) and not issubclass(impl, token):
                msg = f"Implementation {impl.__name__} must be a subclass of {token.__name__}"
                raise TypeError(msg)
            factory = constructor_for(impl)

        self._bind(token, Binding(factory=factory), names)

    def register_instance(self, token: type[T], instance: T, *, names: Iterable[str] = ()) -> None:
        """Register a pre-built instance, returned by both `create` and `get`."""
        self._check_token(token)
        if instance is None:
            msg = "Cannot register None as an instance."
            raise ValueError(msg)
        if not _is_protocol(token) and not isinstance(instance, token):
            msg = f"Instance of {type(instance).__name__} is not an instance of {token.__name__}"
            raise TypeError(msg)

        self._bind(token, Binding(factory=None, instance=instance), names)

    def _bind(self, token: type, binding: Binding, names: Iterable[str]) -> None:
        with self._lock:
            if token in self._bindings:
                msg = f"Token {qualified_name(token)} is already registered."
                raise KeyError(msg)
            self._registry.add(token, *names)
            self._bindings[token] = binding

    @overload
    def create(self, token: type[T]) -> T: ...

    @overload
    def create(self, token: str) -> object: ...

    def create(self, token: Token[T]) -> object:
        """Construct a new instance of the token's type; nothing is cached."""
        tp = self._identify(token)

        if self._delegate is not None:
            instance = self._delegate._find(tp, cached=False)
            if instance is not None:
                logger.debug("Delegate provided a new %s", qualified_name(tp))
                return instance

        return self._construct(tp)

    @overload
    def get(self, token: type[T]) -> T: ...

    @overload
    def get(self, token: str) -> object: ...

    def get(self, token: Token[T]) -> object:
        """Return the single instance of the token's type, constructing it on first use."""
        tp = self._identify(token)

        if self._delegate is not None:
            instance = self._delegate._find(tp, cached=True)
            if instance is not None:
                return instance

        instance = self._store.get_or_create(tp, partial(self._construct, tp))
        if instance is None:
            raise NotFound(tp)
        return instance

    def create_child(self) -> Container:
        """Create a container that prefers this container's bindings.

        The child resolves this container's names; names it registers itself
        stay local to the child.
        """
        return Container(self)

    def is_cached(self, token: Token[T]) -> bool:
        return self._identify(token) in self._store

    def _find(self, tp: type, *, cached: bool) -> object | None:
        """Answer a child's request from explicit bindings only; None on a miss."""
        if self._delegate is not None:
            instance = self._delegate._find(tp, cached=cached)
            if instance is not None:
                return instance

        binding = self._bindings.get(tp)
        if binding is None:
            return None
        if binding.instance is not None:
            return binding.instance
        if cached:
            return self._store.get_or_create(tp, partial(self._construct, tp))
        return self._construct(tp)

    def _construct(self, tp: type) -> object:
        binding = self._bindings.get(tp)
        if binding is not None and binding.instance is not None:
            return binding.instance

        factory = binding.factory if binding is not None else None
        if factory is None:
            factory = constructor_for(tp)

        logger.debug("Constructing %s", qualified_name(tp))
        return instantiate(tp, factory)

    def _identify(self, token: object) -> type:
        if isinstance(token, str):
            return self._registry.resolve(token)
        self._check_token(token)
        return cast("type", token)

    @staticmethod
    def _check_token(token: object) -> None:
        if not inspect.isclass(token):
            msg = f"Tokens must be classes or type names, got {token!r}"
            raise TypeError(msg)
