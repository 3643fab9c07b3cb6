"""
SpinelFaults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults
- REGISTRY faults
- LOADER faults
- DISCOVERY faults
"""

from typing import Any, Optional
from .core import Fault, FaultDomain, Severity


def _type_name(obj: Any) -> str:
    """Fully-qualified name of a class (or of an object's class)."""
    cls = obj if isinstance(obj, type) else type(obj)
    return f"{cls.__module__}.{cls.__qualname__}"


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            retryable=False,
            metadata=metadata,
        )


class ConfigMissingFault(ConfigFault):
    """Required configuration is missing."""

    def __init__(self, key: str, **kwargs):
        super().__init__(
            code="CONFIG_MISSING",
            message=f"Required configuration key '{key}' is missing",
            metadata={"key": key, **kwargs.get("metadata", {})},
        )


class ConfigInvalidFault(ConfigFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# REGISTRY Faults
# ============================================================================

class RegistryFault(Fault):
    """Base class for service registry faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.REGISTRY,
            severity=severity,
            retryable=False,
            metadata=metadata,
        )


class InvalidDescriptorFault(RegistryFault):
    """A provider registration was malformed (e.g. no contracts)."""

    def __init__(self, provider: str, reason: str, **kwargs):
        super().__init__(
            code="INVALID_DESCRIPTOR",
            message=f"Invalid registration for provider '{provider}': {reason}",
            metadata={"provider": provider, "reason": reason, **kwargs.get("metadata", {})},
        )
        self.provider = provider
        self.reason = reason


# ============================================================================
# LOADER Faults
# ============================================================================

class LoaderFault(Fault):
    """Base class for provider resolution and loading faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.LOADER,
            severity=severity,
            retryable=False,
            metadata=metadata,
        )


class NullContractFault(LoaderFault):
    """load() was called without a contract."""

    def __init__(self, **kwargs):
        super().__init__(
            code="NULL_CONTRACT",
            message="contract can not be None",
            metadata=kwargs.get("metadata", {}),
        )


class ProviderInitializationFault(LoaderFault):
    """A provider class could not be constructed."""

    def __init__(self, provider_type: Any, reason: str, **kwargs):
        provider_name = _type_name(provider_type)
        super().__init__(
            code="PROVIDER_INITIALIZATION_FAILED",
            message=f"{provider_name} could not be initialized: {reason}",
            metadata={"provider": provider_name, "reason": reason, **kwargs.get("metadata", {})},
        )
        self.provider_type = provider_type
        self.provider_name = provider_name


class ContractMismatchFault(LoaderFault):
    """A resolved provider instance does not satisfy the requested contract."""

    def __init__(self, instance: Any, contract: Any, reason: Optional[str] = None, **kwargs):
        actual = _type_name(instance)
        expected = _type_name(contract) if isinstance(contract, type) else repr(contract)
        message = f"{actual} can not cast to {expected}"
        if reason:
            message += f" ({reason})"
        super().__init__(
            code="CONTRACT_MISMATCH",
            message=message,
            metadata={"actual": actual, "expected": expected, **kwargs.get("metadata", {})},
        )
        self.actual_type = type(instance)
        self.contract = contract


# ============================================================================
# DISCOVERY Faults
# ============================================================================

class DiscoveryFault(Fault):
    """Provider discovery failed (package import or declaration errors)."""

    def __init__(self, target: str, reason: str, **kwargs):
        super().__init__(
            code="DISCOVERY_FAILED",
            message=f"Discovery failed for '{target}': {reason}",
            domain=FaultDomain.DISCOVERY,
            retryable=False,
            metadata={"target": target, "reason": reason, **kwargs.get("metadata", {})},
        )
        self.target = target


# Short aliases matching the error taxonomy names
NullContract = NullContractFault
InvalidDescriptor = InvalidDescriptorFault
ProviderInitializationError = ProviderInitializationFault
ContractMismatch = ContractMismatchFault
