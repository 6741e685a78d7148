from __future__ import annotations


UNABLE_TO_FIND_S_IN_THIS_CONTEXT = "Unable to find '%s' in this context!"
BAD_NAME = "Names passed to create must be resolvable type names!\n\t%s"
UNABLE_TO_FIND_CONSTRUCTOR_FOR_S = "Unable to find bean constructor for %s!"
UNABLE_TO_CREATE_INSTANCE_OF_S = "Unable to create instance of %s"


def qualified_name(tp: object) -> str:
    """Display name of a type: `module.qualname`, falling back to repr()."""
    module = getattr(tp, "__module__", None)
    qualname = getattr(tp, "__qualname__", None)
    if qualname is None:
        return repr(tp)
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


class ResolutionError(RuntimeError):
    pass


class InvalidTypeName(ResolutionError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(BAD_NAME % name)
        self.name = name


class NoSuchConstructor(ResolutionError):
    def __init__(self, tp: object) -> None:
        super().__init__(UNABLE_TO_FIND_CONSTRUCTOR_FOR_S % qualified_name(tp))
        self.type = tp


class InstantiationFailure(ResolutionError):
    def __init__(self, tp: object) -> None:
        super().__init__(UNABLE_TO_CREATE_INSTANCE_OF_S % qualified_name(tp))
        self.type = tp


class NotFound(ResolutionError):
    def __init__(self, tp: object) -> None:
        super().__init__(UNABLE_TO_FIND_S_IN_THIS_CONTEXT % qualified_name(tp))
        self.type = tp
