"""
SpinelFaults - Structured fault handling for the service registry.

Errors in Spinel are typed fault signals: every fault carries a stable
code, a domain, a severity and metadata, and always propagates to the
caller of ``register`` / ``load``.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain taxonomy
- Severity: Severity levels
- Domain faults for config, registry, loader and discovery
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
)

from .domains import (
    ConfigFault,
    ConfigMissingFault,
    ConfigInvalidFault,
    RegistryFault,
    InvalidDescriptorFault,
    LoaderFault,
    NullContractFault,
    ProviderInitializationFault,
    ContractMismatchFault,
    DiscoveryFault,
    NullContract,
    InvalidDescriptor,
    ProviderInitializationError,
    ContractMismatch,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_DEFAULTS",

    # Domain faults
    "ConfigFault",
    "ConfigMissingFault",
    "ConfigInvalidFault",
    "RegistryFault",
    "InvalidDescriptorFault",
    "LoaderFault",
    "NullContractFault",
    "ProviderInitializationFault",
    "ContractMismatchFault",
    "DiscoveryFault",

    # Aliases
    "NullContract",
    "InvalidDescriptor",
    "ProviderInitializationError",
    "ContractMismatch",
]
