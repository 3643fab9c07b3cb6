"""
Faults System (spinel/faults)

Tests Fault, FaultDomain, Severity and the registry/loader/config faults.
"""

import pytest

from spinel.faults import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
    ConfigMissingFault,
    ConfigInvalidFault,
    InvalidDescriptorFault,
    NullContractFault,
    ProviderInitializationFault,
    ContractMismatchFault,
    DiscoveryFault,
    NullContract,
    InvalidDescriptor,
    ProviderInitializationError,
    ContractMismatch,
)


class Codec:
    pass


class Gzip:
    pass


# ============================================================================
# Severity & FaultDomain
# ============================================================================

class TestSeverity:

    def test_values(self):
        assert Severity.INFO == "info"
        assert Severity.WARN == "warn"
        assert Severity.ERROR == "error"
        assert Severity.FATAL == "fatal"

    def test_aliases(self):
        assert Severity.LOW == Severity.INFO
        assert Severity.CRITICAL == Severity.FATAL


class TestFaultDomain:

    def test_standard_domains(self):
        assert FaultDomain.CONFIG.name == "config"
        assert FaultDomain.REGISTRY.name == "registry"
        assert FaultDomain.LOADER.name == "loader"
        assert FaultDomain.DISCOVERY.name == "discovery"

    def test_domain_equality_and_hash(self):
        d1 = FaultDomain("plugins", "")
        d2 = FaultDomain("plugins", "")
        assert d1 == d2
        assert d1 in {d2}
        assert FaultDomain("other") != d1

    def test_every_standard_domain_has_defaults(self):
        for domain in (FaultDomain.CONFIG, FaultDomain.REGISTRY, FaultDomain.LOADER, FaultDomain.DISCOVERY):
            assert domain in DOMAIN_DEFAULTS
            assert DOMAIN_DEFAULTS[domain]["retryable"] is False


# ============================================================================
# Fault
# ============================================================================

class TestFault:

    def test_basic_fault(self):
        f = Fault(code="SOMETHING", message="went wrong", domain=FaultDomain.LOADER)
        assert f.code == "SOMETHING"
        assert f.severity == Severity.ERROR
        assert f.retryable is False
        assert str(f) == "[SOMETHING] went wrong"

    def test_missing_fields_rejected(self):
        with pytest.raises(TypeError):
            Fault(code="X", message="no domain")

    def test_custom_domain_defaults(self):
        f = Fault(code="X", message="y", domain=FaultDomain("custom"))
        assert f.severity == Severity.ERROR
        assert f.retryable is False

    def test_to_dict(self):
        f = Fault(code="X", message="y", domain=FaultDomain.CONFIG, metadata={"k": 1})
        data = f.to_dict()
        assert data["code"] == "X"
        assert data["domain"] == "config"
        assert data["severity"] == "fatal"
        assert data["metadata"] == {"k": 1}


# ============================================================================
# Domain faults
# ============================================================================

class TestDomainFaults:

    def test_aliases_are_the_fault_classes(self):
        assert NullContract is NullContractFault
        assert InvalidDescriptor is InvalidDescriptorFault
        assert ProviderInitializationError is ProviderInitializationFault
        assert ContractMismatch is ContractMismatchFault

    def test_null_contract(self):
        f = NullContractFault()
        assert f.code == "NULL_CONTRACT"
        assert f.domain == FaultDomain.LOADER
        assert isinstance(f, Fault)

    def test_invalid_descriptor(self):
        f = InvalidDescriptorFault("pkg.Impl", "contracts is None or empty")
        assert f.code == "INVALID_DESCRIPTOR"
        assert f.domain == FaultDomain.REGISTRY
        assert "pkg.Impl" in f.message
        assert f.metadata["reason"] == "contracts is None or empty"

    def test_provider_initialization_names_type(self):
        f = ProviderInitializationFault(Gzip, "TypeError: boom")
        assert f.code == "PROVIDER_INITIALIZATION_FAILED"
        assert f.provider_type is Gzip
        assert f"{Gzip.__module__}.Gzip" in f.message
        assert "could not be initialized" in f.message

    def test_contract_mismatch_names_both_types(self):
        f = ContractMismatchFault(Gzip(), Codec)
        assert f.code == "CONTRACT_MISMATCH"
        assert "Gzip" in f.message
        assert "Codec" in f.message
        assert f.actual_type is Gzip
        assert f.contract is Codec

    def test_contract_mismatch_reason(self):
        f = ContractMismatchFault(Gzip(), Codec, reason="not runtime checkable")
        assert "not runtime checkable" in f.message

    def test_discovery_fault(self):
        f = DiscoveryFault("myapp.plugins", "ImportError: nope")
        assert f.code == "DISCOVERY_FAILED"
        assert f.target == "myapp.plugins"
        assert f.severity == Severity.FATAL

    def test_config_faults(self):
        assert ConfigMissingFault("packages").code == "CONFIG_MISSING"
        f = ConfigInvalidFault("max_depth", "expected int")
        assert f.code == "CONFIG_INVALID"
        assert f.domain == FaultDomain.CONFIG
