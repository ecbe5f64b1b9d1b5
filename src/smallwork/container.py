"""Dependency container with constructor autowiring.

Bindings map a key (a string name or a class) to a factory that receives
the container. ``make()`` builds classes that were never bound by reading
their constructor signature and resolving each parameter in turn.

Thread safety:
    Bindings are registered during setup (single-threaded). The instance
    cache is shared at serving time, so the first resolution of a
    singleton runs under a re-entrant lock with a double-check; a
    singleton factory may resolve other singletons without deadlocking.

Known hazard:
    Constructor dependency cycles are not detected. ``make(A)`` where
    ``A`` needs ``B`` and ``B`` needs ``A`` recurses until Python raises
    ``RecursionError``.
"""

import inspect
import logging
import threading
from types import NoneType, UnionType
from typing import Any, Union, get_args, get_origin

from smallwork._internal.types import Factory
from smallwork.errors import AutowireFailure, UnknownBinding

logger = logging.getLogger("smallwork.container")

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class Container:
    """Registry of factories, singletons, and instances.

    Usage::

        container = Container()
        container.singleton("db", lambda c: Database(c.resolve("config")))
        container.instance("config", config)

        db = container.resolve("db")          # built once, then cached
        users = container.make(UserController) # constructor autowired
    """

    __slots__ = ("_bindings", "_instances", "_lock", "_singletons")

    def __init__(self) -> None:
        self._bindings: dict[Any, Factory] = {}
        self._singletons: set[Any] = set()
        self._instances: dict[Any, Any] = {}
        self._lock = threading.RLock()

    # -- Registration --

    def bind(self, key: Any, factory: Factory) -> None:
        """Register a factory that runs on every resolve."""
        self._bindings[key] = factory
        self._singletons.discard(key)

    def singleton(self, key: Any, factory: Factory) -> None:
        """Register a factory whose first result is cached."""
        self._bindings[key] = factory
        self._singletons.add(key)

    def instance(self, key: Any, value: Any) -> None:
        """Register a ready-made value. Takes precedence over any factory."""
        self._instances[key] = value

    def has(self, key: Any) -> bool:
        """True if *key* has a factory or an instance."""
        return key in self._bindings or key in self._instances

    # -- Resolution --

    def resolve(self, key: Any) -> Any:
        """Return the value bound to *key*.

        Raises ``UnknownBinding`` if nothing is registered under *key*.
        """
        if key in self._instances:
            return self._instances[key]

        factory = self._bindings.get(key)
        if factory is None:
            raise UnknownBinding(key)

        if key not in self._singletons:
            return factory(self)

        with self._lock:
            if key in self._instances:
                return self._instances[key]
            result = factory(self)
            self._instances[key] = result
            return result

    def make(self, cls: Any) -> Any:
        """Resolve *cls* if it is bound, otherwise construct it.

        Each constructor parameter is filled from, in order: a binding
        registered under its annotation (``X | None`` is looked up as
        ``X`` too), a recursive ``make`` of its annotated class, or its
        default value. Anything else raises ``AutowireFailure`` naming
        the parameter. A default also covers a class that cannot be
        autowired.
        """
        if self.has(cls):
            return self.resolve(cls)
        if not isinstance(cls, type):
            raise UnknownBinding(cls)

        if cls.__init__ is object.__init__:
            return cls()

        try:
            signature = inspect.signature(cls.__init__, eval_str=True)
        except (NameError, ValueError) as exc:
            raise AutowireFailure(cls, "__init__") from exc

        logger.debug("Autowiring %s.%s", cls.__module__, cls.__qualname__)
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for name, param in list(signature.parameters.items())[1:]:
            if param.kind in _SKIPPED_KINDS:
                continue
            value = self._autowire_parameter(cls, name, param)
            if param.kind is inspect.Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[name] = value
        return cls(*args, **kwargs)

    def _autowire_parameter(self, cls: type, name: str, param: inspect.Parameter) -> Any:
        annotation = param.annotation
        has_default = param.default is not inspect.Parameter.empty

        if annotation is inspect.Parameter.empty:
            if has_default:
                return param.default
            raise AutowireFailure(cls, name)

        if _is_hashable(annotation) and self.has(annotation):
            return self.resolve(annotation)

        target = _unwrap_optional(annotation)
        if target is not annotation and _is_hashable(target) and self.has(target):
            return self.resolve(target)
        if isinstance(target, type) and target is not Any and target.__module__ != "builtins":
            try:
                return self.make(target)
            except AutowireFailure:
                if not has_default:
                    raise
                logger.debug("Falling back to default for %s.%s", cls.__qualname__, name)

        if has_default:
            return param.default
        raise AutowireFailure(cls, name, annotation)


def _unwrap_optional(annotation: Any) -> Any:
    """``X | None`` (or ``Optional[X]``) -> ``X``; anything else unchanged."""
    if get_origin(annotation) not in (Union, UnionType):
        return annotation
    members = [arg for arg in get_args(annotation) if arg is not NoneType]
    if len(members) == 1:
        return members[0]
    return annotation


def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True
