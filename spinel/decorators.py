"""
Decorators for declaring service providers.
"""

from typing import Any, Callable, Optional, Sequence, Tuple, Type, TypeVar
from dataclasses import dataclass

from .descriptors import Descriptor
from .faults import InvalidDescriptorFault
from .registry import ServiceRegistry, get_default_registry, validate_contracts


T = TypeVar("T")

# Class attribute holding the declaration
DECLARATION_ATTR = "__spi_provider__"


@dataclass(frozen=True)
class ProviderDeclaration:
    """What a provider class declared via ``@service_provider``."""

    provider: type
    services: Tuple[type, ...]
    priorities: Tuple[int, ...]
    singleton: bool = False

    @property
    def name(self) -> str:
        return f"{self.provider.__module__}.{self.provider.__qualname__}"

    def validate(self) -> None:
        """Raise InvalidDescriptorFault if the declared contracts or priorities are malformed."""
        validate_contracts(self.name, self.services, self.priorities)

    def register(self, registry: Optional[ServiceRegistry] = None) -> Descriptor:
        """Register the declared provider (default registry if none given)."""
        registry = registry if registry is not None else get_default_registry()
        return registry.register(
            self.provider,
            self.services,
            self.priorities,
            singleton=self.singleton,
        )


def service_provider(
    *services: type,
    priorities: Sequence[int] = (),
    singleton: bool = False,
) -> Callable[[Type[T]], Type[T]]:
    """
    Decorator to mark a class as a provider of one or more contracts.

    Nothing is registered at decoration time; the discovery step (or an
    explicit ``get_declaration(cls).register()``) does that.

    Args:
        *services: Contracts the class implements
        priorities: Priority per contract, same order as ``services``.
            Higher loads first. Shorter lists are padded with 0, longer
            lists are truncated.
        singleton: Construct the provider once and reuse it

    Raises:
        InvalidDescriptorFault: If no services are given, services are not
            classes or a priority is not an integer

    Example:
        @service_provider(Codec, Compressor, priorities=[10])
        class ZstdCodec:
            ...
    """
    def decorator(cls: Type[T]) -> Type[T]:
        name = f"{cls.__module__}.{cls.__qualname__}"
        if not services:
            raise InvalidDescriptorFault(name, "services is None or empty")
        contracts, paired = validate_contracts(name, services, priorities)
        declaration = ProviderDeclaration(
            provider=cls,
            services=tuple(contracts),
            priorities=tuple(paired),
            singleton=bool(singleton),
        )
        setattr(cls, DECLARATION_ATTR, declaration)
        return cls

    return decorator


def get_declaration(cls: Any) -> Optional[ProviderDeclaration]:
    """
    Get the provider declaration of a class.

    Only the class's own declaration counts: a subclass of a declared
    provider is not a provider unless it is decorated itself.
    """
    if not isinstance(cls, type):
        return None
    declaration = cls.__dict__.get(DECLARATION_ATTR)
    if isinstance(declaration, ProviderDeclaration):
        return declaration
    return None


def is_provider(cls: Any) -> bool:
    """Check if a class carries its own ``@service_provider`` declaration."""
    return get_declaration(cls) is not None
