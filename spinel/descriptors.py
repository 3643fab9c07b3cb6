"""
Provider descriptors - how a registered provider becomes an instance.

Two variants:
- InstanceDescriptor: wraps an already-constructed object
- ClassDescriptor: wraps an uninstantiated provider class, optionally
  caching the first instance (singleton)
"""

from typing import Any, Callable, Dict, Optional, Protocol, Type, TypeVar, runtime_checkable
from dataclasses import dataclass
import threading

from .faults import InvalidDescriptorFault, ProviderInitializationFault


T = TypeVar("T")

# Marks an empty singleton slot (a factory may legitimately return None)
_UNSET = object()


@dataclass(frozen=True, slots=True)
class DescriptorMeta:
    """Compact, serializable descriptor metadata."""
    name: str
    kind: str  # "instance" or "class"
    module: str = ""
    qualname: str = ""
    singleton: bool = False

    @property
    def token(self) -> str:
        """Fully-qualified provider name."""
        return f"{self.module}.{self.qualname}" if self.module else self.qualname

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "module": self.module,
            "qualname": self.qualname,
            "singleton": self.singleton,
        }


@runtime_checkable
class Descriptor(Protocol):
    """
    Descriptor protocol - how to obtain a provider instance.

    All descriptors must implement this interface.
    """

    @property
    def meta(self) -> DescriptorMeta:
        """Descriptor metadata."""
        ...

    def resolve(self) -> Any:
        """
        Produce the provider instance.

        Raises:
            ProviderInitializationFault: If the provider cannot be constructed
        """
        ...


class InstanceDescriptor:
    """Descriptor that returns a pre-built provider instance."""

    __slots__ = ("_meta", "_instance")

    def __init__(self, instance: Any):
        cls = type(instance)
        self._instance = instance
        self._meta = DescriptorMeta(
            name=cls.__name__,
            kind="instance",
            module=cls.__module__,
            qualname=cls.__qualname__,
            singleton=True,
        )

    @property
    def meta(self) -> DescriptorMeta:
        return self._meta

    @property
    def instance(self) -> Any:
        return self._instance

    def resolve(self) -> Any:
        """Return the wrapped instance."""
        return self._instance

    def __repr__(self) -> str:
        return f"InstanceDescriptor({self._meta.token})"


class ClassDescriptor:
    """
    Descriptor that instantiates a provider class with its zero-argument
    constructor.

    With ``singleton=True`` the first instance is cached on the descriptor
    and returned for every later resolution. Concurrent first resolutions
    construct exactly once; the losing threads get the winner's instance.
    A failed construction leaves the slot empty.
    """

    __slots__ = ("_meta", "_cls", "_factory", "_singleton", "_instance", "_lock")

    def __init__(
        self,
        provider_type: Type[T],
        singleton: bool = False,
        factory: Optional[Callable[[], T]] = None,
    ):
        if not isinstance(provider_type, type):
            raise InvalidDescriptorFault(
                repr(provider_type),
                "a class descriptor requires a class",
            )

        self._cls = provider_type
        self._factory = factory if factory is not None else provider_type
        self._singleton = bool(singleton)
        self._instance = _UNSET
        self._lock = threading.Lock()
        self._meta = DescriptorMeta(
            name=provider_type.__name__,
            kind="class",
            module=provider_type.__module__,
            qualname=provider_type.__qualname__,
            singleton=self._singleton,
        )

    @property
    def meta(self) -> DescriptorMeta:
        return self._meta

    @property
    def provider_type(self) -> type:
        return self._cls

    @property
    def singleton(self) -> bool:
        return self._singleton

    @property
    def instantiated(self) -> bool:
        """True once a singleton instance has been cached."""
        return self._instance is not _UNSET

    def resolve(self) -> Any:
        """Construct (or return the cached) provider instance."""
        if not self._singleton:
            return self._construct()

        # Fast path: already built
        instance = self._instance
        if instance is not _UNSET:
            return instance

        with self._lock:
            if self._instance is _UNSET:
                self._instance = self._construct()
            return self._instance

    def _construct(self) -> Any:
        try:
            return self._factory()
        except Exception as exc:
            raise ProviderInitializationFault(
                self._cls,
                f"{type(exc).__name__}: {exc}",
            ) from exc

    def __repr__(self) -> str:
        return f"ClassDescriptor({self._meta.token}, singleton={self._singleton})"


_DESCRIPTOR_TYPES = (InstanceDescriptor, ClassDescriptor)


def descriptor_for(provider: Any, singleton: bool = False) -> Descriptor:
    """
    Normalise a provider into a descriptor.

    - Existing descriptors are returned unchanged (``singleton`` is ignored)
    - Classes become ClassDescriptor(provider, singleton)
    - Anything else becomes InstanceDescriptor(provider)

    Raises:
        InvalidDescriptorFault: If provider is None
    """
    if provider is None:
        raise InvalidDescriptorFault("None", "provider can not be None")
    if isinstance(provider, _DESCRIPTOR_TYPES):
        return provider
    if isinstance(provider, type):
        return ClassDescriptor(provider, singleton=singleton)
    return InstanceDescriptor(provider)
