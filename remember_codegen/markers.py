"""
Markers for annotating Python classes.

The markers carry no behavior at runtime; the Python source adapter reads
them from the source text. Typical use::

    from typing import Annotated

    from remember_codegen.markers import Key, Provide, Saveable, Value, remember_saveable


    @remember_saveable(injector="inject_class")
    class CounterState:
        index: Annotated[int, Saveable("index")]

        def __init__(
            self,
            initial_index: Annotated[int, Value("10"), Key(), Saveable("index")],
            user: Annotated[User, Provide("load_user")],
        ):
            self.index = initial_index
            self.user = user
"""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T")


class Marker:
    """Base class for all parameter and property markers."""

    def __init__(self, *args: Any):
        self.args = args

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(arg) for arg in self.args)})"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class Value(Marker):
    """Default is the given source expression, verbatim."""

    def __init__(self, expression: str):
        super().__init__(expression)


class FrameworkInject(Marker):
    """Default is resolved by the injection framework."""


class NamedInject(Marker):
    """Default is resolved by the class-level injector function."""


class Provide(Marker):
    """Default is the result of calling a provider function."""

    def __init__(self, provider: str, *args: str):
        super().__init__(provider, *args)


class AmbientScope(Marker):
    """Default is the caller-scoped ambient value."""


class Key(Marker):
    """A change of this parameter rebuilds the remembered instance."""


class Saveable(Marker):
    """Value is persisted under the given key.

    Can be used as ``Annotated`` metadata or as a decorator on a property.
    """

    def __init__(self, key: str):
        super().__init__(key)

    def __call__(self, fn: T) -> T:
        return fn


def remember(cls: type | None = None, *, injector: str | None = None, injection_mode: str | None = None) -> Any:
    """Class decorator selecting generation of a remember function."""

    def decorate(target: type) -> type:
        return target

    return decorate(cls) if cls is not None else decorate


def remember_saveable(cls: type | None = None, *, injector: str | None = None, injection_mode: str | None = None) -> Any:
    """Class decorator selecting generation of a remember function and a saver."""

    def decorate(target: type) -> type:
        return target

    return decorate(cls) if cls is not None else decorate
