"""
Spinel - Service provider registry

Providers declare the contracts they implement; callers ask for every
provider of a contract without knowing the provider classes.

Key Features:
- Append-only, thread-safe registry of contract -> provider descriptors
- Priority ordering per contract (descending, stable on ties)
- Lazy instantiation with at-most-once singleton construction
- Fail-fast loading: every loaded provider was constructed and satisfies
  the contract
- Declarative providers via @service_provider and package discovery
"""

__version__ = "0.1.0"

from .descriptors import (
    Descriptor,
    DescriptorMeta,
    InstanceDescriptor,
    ClassDescriptor,
    descriptor_for,
)

from .registry import (
    ServiceRegistry,
    RegistryEntry,
    get_default_registry,
    set_default_registry,
)

from .loader import (
    ServiceLoader,
    load,
)

from .decorators import (
    service_provider,
    ProviderDeclaration,
    get_declaration,
    is_provider,
)

from .discovery import (
    PackageScanner,
    ProviderDiscovery,
    bootstrap,
)

from .config import (
    ConfigLoader,
    SpinelConfig,
    load_config,
)

from .diagnostics import (
    Diagnostics,
    DiagnosticEvent,
    DiagnosticEventType,
    LoggingDiagnosticListener,
)

from .faults import (
    Fault,
    NullContractFault,
    InvalidDescriptorFault,
    ProviderInitializationFault,
    ContractMismatchFault,
    DiscoveryFault,
    NullContract,
    InvalidDescriptor,
    ProviderInitializationError,
    ContractMismatch,
)

__all__ = [
    # Descriptors
    "Descriptor",
    "DescriptorMeta",
    "InstanceDescriptor",
    "ClassDescriptor",
    "descriptor_for",

    # Registry
    "ServiceRegistry",
    "RegistryEntry",
    "get_default_registry",
    "set_default_registry",

    # Loader
    "ServiceLoader",
    "load",

    # Declaration & discovery
    "service_provider",
    "ProviderDeclaration",
    "get_declaration",
    "is_provider",
    "PackageScanner",
    "ProviderDiscovery",
    "bootstrap",

    # Config
    "ConfigLoader",
    "SpinelConfig",
    "load_config",

    # Diagnostics
    "Diagnostics",
    "DiagnosticEvent",
    "DiagnosticEventType",
    "LoggingDiagnosticListener",

    # Faults
    "Fault",
    "NullContractFault",
    "InvalidDescriptorFault",
    "ProviderInitializationFault",
    "ContractMismatchFault",
    "DiscoveryFault",
    "NullContract",
    "InvalidDescriptor",
    "ProviderInitializationError",
    "ContractMismatch",
]
