"""
Dependency Injection Container.

Replaces the global ServiceLocator with an explicit container owned by the
bootstrapper. Registrations are collected by a ContainerBuilder, then frozen
into a Container which resolves services through constructor injection.

Usage:
    builder = ContainerBuilder()
    builder.register_type(WindowManager).as_implemented_interfaces().single_instance()
    builder.register_instance(config).as_(ConfigManager)
    container = builder.build()

    wm = container.resolve(IWindowManager)
    ...
    container.dispose()
"""
import inspect
import threading
import types
import typing
from abc import ABC, ABCMeta
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
from loguru import logger

T = TypeVar('T')


class ContainerError(Exception):
    """Base class for container failures."""
    pass


class ResolutionError(ContainerError):
    """A service or one of its constructor dependencies could not be resolved."""
    pass


class ContainerDisposedError(ContainerError):
    """The container was used after dispose()."""
    pass


class Lifetime(Enum):
    PER_DEPENDENCY = "per_dependency"
    SINGLE_INSTANCE = "single_instance"


class Registration:
    """
    A single registration, configured fluently.

    Exposes the implementation under one or more service types. With no
    explicit service the registration is exposed as its own type.
    """

    def __init__(self, implementation_type: type, activator: Callable[["Container"], Any],
                 lifetime: Lifetime = Lifetime.PER_DEPENDENCY, owned: bool = True):
        self.implementation_type = implementation_type
        self.activator = activator
        self.lifetime = lifetime
        self.owned = owned
        self._services: List[type] = []

    @property
    def services(self) -> List[type]:
        return list(self._services) or [self.implementation_type]

    def as_(self, *services: type) -> "Registration":
        for service in services:
            if service not in self._services:
                self._services.append(service)
        return self

    def as_self(self) -> "Registration":
        return self.as_(self.implementation_type)

    def as_implemented_interfaces(self) -> "Registration":
        """Expose under every abstract base class the implementation derives from."""
        return self.as_(*implemented_interfaces(self.implementation_type))

    def single_instance(self) -> "Registration":
        self.lifetime = Lifetime.SINGLE_INSTANCE
        return self

    def instance_per_dependency(self) -> "Registration":
        self.lifetime = Lifetime.PER_DEPENDENCY
        return self

    def externally_owned(self) -> "Registration":
        self.owned = False
        return self

    def __repr__(self):
        names = ", ".join(s.__name__ for s in self.services)
        return f"<Registration {self.implementation_type.__name__} as [{names}] {self.lifetime.value}>"


def implemented_interfaces(cls: type) -> List[type]:
    """ABCs in the MRO of `cls`, excluding `cls` itself and `abc.ABC`."""
    return [
        base for base in cls.__mro__[1:]
        if isinstance(base, ABCMeta) and base is not ABC
    ]


class ContainerBuilder:
    """
    Collects registrations and builds a Container.

    A builder can only be built once.
    """

    def __init__(self):
        self._registrations: List[Registration] = []
        self._built = False

    def register_type(self, cls: Type[T]) -> Registration:
        """Register a class constructed by the container via constructor injection."""
        registration = Registration(cls, lambda c: c.create(cls))
        self._registrations.append(registration)
        return registration

    def register_instance(self, instance: Any) -> Registration:
        """Register an existing object. It is externally owned and never disposed by the container."""
        registration = Registration(type(instance), lambda c: instance,
                                    Lifetime.SINGLE_INSTANCE, owned=False)
        self._registrations.append(registration)
        return registration

    def register_factory(self, factory: Callable[["Container"], T],
                         implementation_type: Optional[type] = None) -> Registration:
        """Register a callable receiving the container and returning the instance."""
        if implementation_type is None:
            implementation_type = typing.get_type_hints(factory).get("return", object)
        registration = Registration(implementation_type, factory)
        self._registrations.append(registration)
        return registration

    @property
    def registrations(self) -> List[Registration]:
        return list(self._registrations)

    def build(self) -> "Container":
        if self._built:
            raise ContainerError("ContainerBuilder.build() can only be called once")
        self._built = True
        return Container(self._registrations)


class Container:
    """
    Resolves services registered through a ContainerBuilder.

    Single-instance services are created lazily on first resolve and cached
    per registration; a registration exposed under several interfaces yields
    the same object for each of them.
    """

    def __init__(self, registrations: List[Registration]):
        self._services: Dict[type, Registration] = {}
        for registration in registrations:
            for service in registration.services:
                # Last registration for a service wins
                self._services[service] = registration
        self._singletons: Dict[Registration, Any] = {}
        self._owned: List[Any] = []
        self._lock = threading.RLock()
        self._resolving = threading.local()
        self._disposed = False
        logger.debug(f"Container built with {len(registrations)} registrations")

    @property
    def disposed(self) -> bool:
        return self._disposed

    def is_registered(self, service: type) -> bool:
        return service in self._services

    def resolve(self, service: Type[T]) -> T:
        """
        Resolve a registered service.

        Raises:
            ResolutionError: service (or a dependency) is not registered
            ContainerDisposedError: container already disposed
        """
        self._check_alive()
        registration = self._services.get(service)
        if registration is None:
            raise ResolutionError(f"Service {_type_name(service)} is not registered.")
        return self._activate(registration)

    def try_resolve(self, service: Type[T]) -> Optional[T]:
        if not self.is_registered(service):
            return None
        return self.resolve(service)

    def create(self, cls: Type[T]) -> T:
        """Construct `cls`, resolving its annotated constructor parameters."""
        self._check_alive()
        with self._resolving_scope(cls):
            kwargs = self._constructor_arguments(cls)
            return cls(**kwargs)

    def dispose(self) -> None:
        """Dispose owned instances in reverse creation order. Subsequent calls are no-ops."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            owned, self._owned = self._owned, []
            self._singletons.clear()

        for instance in reversed(owned):
            release = getattr(instance, "dispose", None) or getattr(instance, "close", None)
            if not callable(release):
                continue
            try:
                release()
            except Exception as e:
                logger.error(f"Failed to dispose {type(instance).__name__}: {e}")
        logger.debug(f"Container disposed ({len(owned)} owned instances released)")

    # --- internals ---

    def _activate(self, registration: Registration) -> Any:
        if registration.lifetime is Lifetime.SINGLE_INSTANCE:
            with self._lock:
                if registration in self._singletons:
                    return self._singletons[registration]
                with self._resolving_scope(registration):
                    instance = registration.activator(self)
                self._singletons[registration] = instance
                self._track(registration, instance)
                return instance

        with self._resolving_scope(registration):
            instance = registration.activator(self)
        with self._lock:
            self._track(registration, instance)
        return instance

    @contextmanager
    def _resolving_scope(self, key: Any):
        """
        Mark `key` (a class being constructed or a registration being
        activated) as in progress on this thread.

        Raises:
            ResolutionError: `key` is already being resolved further up the stack
        """
        stack = self._stack()
        if any(entry is key for entry in stack):
            names: List[str] = []
            for entry in stack + [key]:
                name = _type_name(getattr(entry, "implementation_type", entry))
                # A type registration activates, then constructs, the same class
                if not names or names[-1] != name or entry is key:
                    names.append(name)
            raise ResolutionError(f"Circular dependency: {' -> '.join(names)}")
        stack.append(key)
        try:
            yield
        finally:
            stack.pop()

    def _track(self, registration: Registration, instance: Any) -> None:
        if registration.owned and (hasattr(instance, "dispose") or hasattr(instance, "close")):
            self._owned.append(instance)

    def _constructor_arguments(self, cls: type) -> Dict[str, Any]:
        init = cls.__init__
        if not inspect.isfunction(init):
            return {}

        try:
            hints = typing.get_type_hints(init)
        except NameError as e:
            raise ResolutionError(f"Cannot evaluate annotations of {_type_name(cls)}: {e}") from e

        kwargs: Dict[str, Any] = {}
        parameters = list(inspect.signature(init).parameters.values())[1:]
        for param in parameters:
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            has_default = param.default is not param.empty
            service = _unwrap_optional(hints.get(param.name))

            if service is not None and self.is_registered(service):
                kwargs[param.name] = self.resolve(service)
            elif service is Container:
                kwargs[param.name] = self
            elif has_default:
                continue
            else:
                raise ResolutionError(
                    f"Cannot resolve parameter '{param.name}' of {_type_name(cls)}"
                    f" (annotation: {_type_name(service) if service else 'missing'})"
                )
        return kwargs

    def _stack(self) -> List[Any]:
        stack = getattr(self._resolving, "stack", None)
        if stack is None:
            stack = self._resolving.stack = []
        return stack

    def _check_alive(self) -> None:
        if self._disposed:
            raise ContainerDisposedError("Container has been disposed.")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()


def _unwrap_optional(annotation: Any) -> Any:
    """Optional[X] -> X; anything that is not a plain class -> None."""
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        annotation = args[0] if len(args) == 1 else None
    return annotation if isinstance(annotation, type) else None


def _type_name(t: Any) -> str:
    return getattr(t, "__qualname__", repr(t))
