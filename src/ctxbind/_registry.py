from __future__ import annotations

import importlib
import inspect
import logging
import threading

from ._errors import InvalidTypeName, qualified_name


logger = logging.getLogger(__name__)


class TypeRegistry:
    """Maps type names to the types a container can provide.

    Names are registered explicitly, up front: every type added is reachable by
    its `module.qualname` plus any aliases given. With `import_names=True`,
    names that were never registered are also looked up as dotted import paths
    (`package.module.Outer.Inner`).

    A registry with a `parent` resolves its own names first, then the
    parent's. Names added to it stay local and may shadow the parent's.
    """

    def __init__(self, parent: TypeRegistry | None = None, *, import_names: bool | None = None) -> None:
        if import_names is None:
            import_names = parent._import_names if parent is not None else False
        self._parent = parent
        self._names: dict[str, type] = {}
        self._import_names = import_names
        self._lock = threading.Lock()

    def add(self, tp: type, *aliases: str) -> None:
        if not inspect.isclass(tp):
            msg = f"Only classes can be registered by name, got {tp!r}"
            raise TypeError(msg)

        names = (qualified_name(tp), *aliases)
        with self._lock:
            for name in names:
                existing = self._names.get(name)
                if existing is not None and existing is not tp:
                    msg = f"Name {name!r} is already registered for {qualified_name(existing)}"
                    raise ValueError(msg)
            self._names.update(dict.fromkeys(names, tp))

    def resolve(self, name: str) -> type:
        tp = self._names.get(name)
        if tp is not None:
            return tp

        if self._parent is not None:
            try:
                return self._parent.resolve(name)
            except InvalidTypeName:
                if not self._import_names:
                    raise

        if not self._import_names:
            raise InvalidTypeName(name)

        try:
            tp = _import_type(name)
        except (ImportError, AttributeError, ValueError) as exc:
            logger.debug("Unable to import type name %r: %s", name, exc)
            raise InvalidTypeName(name) from exc

        if not inspect.isclass(tp):
            raise InvalidTypeName(name)
        return tp

    def names(self) -> list[str]:
        inherited = self._parent.names() if self._parent is not None else []
        with self._lock:
            return sorted({*inherited, *self._names})

    def __contains__(self, name: object) -> bool:
        return name in self._names or (self._parent is not None and name in self._parent)


def _import_type(name: str) -> object:
    """Import the longest module prefix of `name`, then walk the remaining attributes."""
    parts = name.split(".")
    if not all(part.isidentifier() for part in parts):
        msg = f"Malformed type name: {name!r}"
        raise ValueError(msg)

    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            target: object = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # only keep walking up when the missing module is the one we asked for
            if exc.name is not None and not module_name.startswith(exc.name):
                raise
            continue

        for attr in parts[split:]:
            target = getattr(target, attr)
        return target

    msg = f"No importable module in {name!r}"
    raise ImportError(msg)
