"""
ServiceLoader - public entry point for obtaining providers of a contract.

Loading is eager and all-or-nothing: every descriptor registered for the
contract is resolved and type-checked when the loader is built, and the
first failure aborts the load.
"""

from typing import Any, Generic, Iterator, Optional, Tuple, Type, TypeVar
import logging

from .descriptors import Descriptor
from .faults import ContractMismatchFault, NullContractFault
from .registry import ServiceRegistry, get_default_registry

logger = logging.getLogger("spinel.loader")

S = TypeVar("S")


class ServiceLoader(Generic[S]):
    """
    Ordered, immutable list of providers for one contract.

    The list is a snapshot taken at load time: providers registered later
    do not appear in an existing loader. Two loaders are equal when they are
    bound to the same contract.

    Example:
        for codec in ServiceLoader.load(Codec):
            codec.encode(payload)
    """

    __slots__ = ("_contract", "_providers")

    def __init__(self, contract: Type[S], registry: ServiceRegistry):
        self._contract = contract
        self._providers: Tuple[S, ...] = self._materialize(contract, registry)

    @classmethod
    def load(cls, contract: Type[S], registry: Optional[ServiceRegistry] = None) -> "ServiceLoader[S]":
        """
        Load every provider registered for ``contract``.

        Args:
            contract: Contract class to load providers for
            registry: Registry to read from (defaults to the process-wide one)

        Returns:
            A new ServiceLoader bound to ``contract``

        Raises:
            NullContractFault: If contract is None
            ProviderInitializationFault: If a provider class cannot be constructed
            ContractMismatchFault: If a provider does not satisfy the contract
        """
        if contract is None:
            raise NullContractFault()
        return cls(contract, registry if registry is not None else get_default_registry())

    @staticmethod
    def _materialize(contract: Type[S], registry: ServiceRegistry) -> Tuple[S, ...]:
        descriptors = registry.lookup(contract)
        if not descriptors:
            logger.debug("No providers registered for %r", contract)
            return ()

        with registry.diagnostics.measure(contract=contract) as measure:
            providers = tuple(_resolve(descriptor, contract) for descriptor in descriptors)
            measure.update(count=len(providers))
        return providers

    @property
    def contract(self) -> Type[S]:
        return self._contract

    def list(self) -> Tuple[S, ...]:
        """The loaded providers, highest priority first."""
        return self._providers

    def __iter__(self) -> Iterator[S]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __bool__(self) -> bool:
        return bool(self._providers)

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, ServiceLoader):
            return NotImplemented
        return self._contract == other._contract

    def __hash__(self) -> int:
        return hash(self._contract)

    def __repr__(self) -> str:
        name = getattr(self._contract, "__qualname__", repr(self._contract))
        return f"ServiceLoader({name}, providers={len(self._providers)})"


def _resolve(descriptor: Descriptor, contract: Type[S]) -> S:
    """Resolve one descriptor and check it satisfies ``contract``."""
    instance = descriptor.resolve()
    try:
        compatible = isinstance(instance, contract)
    except TypeError as exc:
        # e.g. a Protocol without @runtime_checkable
        raise ContractMismatchFault(instance, contract, reason=str(exc)) from exc
    if not compatible:
        raise ContractMismatchFault(instance, contract)
    return instance


def load(contract: Type[S], registry: Optional[ServiceRegistry] = None) -> ServiceLoader[S]:
    """Shortcut for :meth:`ServiceLoader.load`."""
    return ServiceLoader.load(contract, registry)
