"""Lazy, thread-safe object provisioning by type.

This package provides a small container that hands out instances of types,
either fresh on every request or as one memoized instance per type, with an
optional parent container whose explicit bindings take precedence.

Exports:
- `Container`: `create` (always new) and `get` (constructed once) by class or
  registered name; explicit bindings via `register` / `register_instance`.
- `TypeRegistry`: name to type resolution used for string tokens.
- `InstanceStore`: the exactly-once memoization behind `Container.get`.
- `ResolutionError` and its subclasses `InvalidTypeName`, `NoSuchConstructor`,
  `InstantiationFailure` and `NotFound`.
"""

from ._container import Container
from ._errors import InstantiationFailure, InvalidTypeName, NoSuchConstructor, NotFound, ResolutionError
from ._registry import TypeRegistry
from ._store import InstanceStore


__all__ = [
    "Container",
    "InstanceStore",
    "InstantiationFailure",
    "InvalidTypeName",
    "NoSuchConstructor",
    "NotFound",
    "ResolutionError",
    "TypeRegistry",
]
