"""
Service registry - process-wide store of contract -> provider mappings.

The registry is append-only: a provider registered under a contract stays
there for the lifetime of the registry. Lookups return snapshots ordered by
descending priority, ties kept in registration order.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass
import itertools
import logging
import threading

from .descriptors import Descriptor, descriptor_for
from .diagnostics import Diagnostics, DiagnosticEventType
from .faults import InvalidDescriptorFault

logger = logging.getLogger("spinel.registry")


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """One provider registration under one contract."""
    descriptor: Descriptor
    priority: int = 0
    sequence: int = 0


def normalize_priorities(priorities: Optional[Iterable[int]], count: int) -> List[int]:
    """
    Pair priorities with ``count`` contracts by index.

    Missing entries default to 0, excess entries are discarded.
    """
    values = list(priorities or ())[:count]
    return values + [0] * (count - len(values))


def validate_contracts(
    name: str,
    contracts: Optional[Sequence[Any]],
    priorities: Optional[Iterable[int]] = None,
) -> Tuple[List[Any], List[int]]:
    """
    Check contracts and priorities for provider ``name``.

    Returns:
        The contracts and their paired priorities

    Raises:
        InvalidDescriptorFault: If contracts is empty or holds a non-class,
            or a priority is not an integer
    """
    contracts = list(contracts or ())

    if not contracts:
        raise InvalidDescriptorFault(name, "contracts is None or empty")

    for contract in contracts:
        if contract is None:
            raise InvalidDescriptorFault(name, "contract can not be None")
        if not isinstance(contract, type):
            raise InvalidDescriptorFault(name, f"contract {contract!r} is not a class")

    paired = normalize_priorities(priorities, len(contracts))
    for priority in paired:
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise InvalidDescriptorFault(name, f"priority {priority!r} is not an integer")

    return contracts, paired


def _priority_key(entry: RegistryEntry) -> int:
    return -entry.priority


class ServiceRegistry:
    """
    Thread-safe, append-only registry of provider descriptors.

    Written to by the discovery step (``register``) and read by
    ``ServiceLoader`` (``lookup``). A single lock guards the mapping so a
    lookup never observes a partially-appended entry.

    Example:
        registry = ServiceRegistry()
        registry.register(JsonCodec, [Codec], [10])
        registry.register(XmlCodec, [Codec])
        registry.lookup(Codec)  # (ClassDescriptor(JsonCodec), ClassDescriptor(XmlCodec))
    """

    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self._entries: Dict[Any, List[RegistryEntry]] = {}
        self._lock = threading.RLock()
        self._counter = itertools.count()
        self._diagnostics = diagnostics or Diagnostics()

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics

    def register(
        self,
        provider: Any,
        contracts: Sequence[Any],
        priorities: Optional[Sequence[int]] = None,
        *,
        singleton: bool = False,
    ) -> Descriptor:
        """
        Register a provider under one or more contracts.

        Args:
            provider: A descriptor, a provider class or a provider instance
            contracts: Non-empty ordered sequence of contract classes
            priorities: Priority per contract (same index); higher loads first
            singleton: For provider classes, cache the first instance

        Returns:
            The descriptor stored in the registry

        Raises:
            InvalidDescriptorFault: If contracts is empty or malformed,
                or a priority is not an integer
        """
        descriptor = descriptor_for(provider, singleton=singleton)
        name = descriptor.meta.token
        contracts, paired = validate_contracts(name, contracts, priorities)

        with self._lock:
            for contract, priority in zip(contracts, paired):
                entry = RegistryEntry(descriptor, priority, next(self._counter))
                self._entries.setdefault(contract, []).append(entry)

        for contract, priority in zip(contracts, paired):
            logger.debug(
                "Registered %s for %s (priority=%d, singleton=%s)",
                name, contract.__qualname__, priority, descriptor.meta.singleton,
            )
            self._diagnostics.emit(
                DiagnosticEventType.REGISTRATION,
                contract=contract,
                provider_name=name,
                priority=priority,
            )

        return descriptor

    def entries(self, contract: Any) -> Tuple[RegistryEntry, ...]:
        """Snapshot of entries for ``contract``, highest priority first."""
        with self._lock:
            entries = list(self._entries.get(contract, ()))
        # sorted() is stable: equal priorities keep registration order
        return tuple(sorted(entries, key=_priority_key))

    def lookup(self, contract: Any) -> Tuple[Descriptor, ...]:
        """
        Get the descriptors registered for ``contract``.

        Returns:
            Descriptors ordered by descending priority (stable), or an empty
            tuple if nothing is registered for the contract
        """
        return tuple(entry.descriptor for entry in self.entries(contract))

    def contracts(self) -> Tuple[Any, ...]:
        """All contracts with at least one provider, in first-registration order."""
        with self._lock:
            return tuple(self._entries)

    def is_registered(self, contract: Any) -> bool:
        """Check if any provider is registered for the contract."""
        with self._lock:
            return contract in self._entries

    def __contains__(self, contract: Any) -> bool:
        return self.is_registered(contract)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"ServiceRegistry(contracts={len(self)})"


# ============================================================================
# Process-wide default registry
# ============================================================================

_default_registry: Optional[ServiceRegistry] = None
_default_lock = threading.Lock()


def get_default_registry() -> ServiceRegistry:
    """
    Get or create the process-wide registry.

    Returns:
        Global ServiceRegistry instance
    """
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = ServiceRegistry()
    return _default_registry


def set_default_registry(registry: Optional[ServiceRegistry]) -> Optional[ServiceRegistry]:
    """
    Replace the process-wide registry.

    Passing None resets it; a fresh registry is created on next access.

    Returns:
        The previous default registry (may be None)
    """
    global _default_registry
    with _default_lock:
        previous = _default_registry
        _default_registry = registry
    return previous
