"""
Service registry (spinel/registry.py)

Tests registration, priority pairing, ordering, snapshots and the
process-wide default registry.
"""

import pytest

from spinel.descriptors import ClassDescriptor, InstanceDescriptor
from spinel.faults import InvalidDescriptorFault
from spinel.registry import (
    RegistryEntry,
    ServiceRegistry,
    get_default_registry,
    normalize_priorities,
    set_default_registry,
)


class Codec:
    pass


class Compressor:
    pass


class Hasher:
    pass


class P1(Codec):
    pass


class P2(Codec):
    pass


class P3(Codec):
    pass


class Multi(Codec, Compressor, Hasher):
    pass


# ============================================================================
# Priority pairing
# ============================================================================

class TestNormalizePriorities:

    def test_exact_length(self):
        assert normalize_priorities([1, 2, 3], 3) == [1, 2, 3]

    def test_padding(self):
        assert normalize_priorities([7], 3) == [7, 0, 0]

    def test_truncation(self):
        assert normalize_priorities([1, 2, 3, 4], 2) == [1, 2]

    def test_absent(self):
        assert normalize_priorities(None, 2) == [0, 0]
        assert normalize_priorities((), 1) == [0]


# ============================================================================
# Registration
# ============================================================================

class TestRegister:

    def test_register_class_returns_descriptor(self, spi_registry):
        descriptor = spi_registry.register(P1, [Codec])
        assert isinstance(descriptor, ClassDescriptor)
        assert spi_registry.lookup(Codec) == (descriptor,)

    def test_register_instance(self, spi_registry):
        obj = P1()
        descriptor = spi_registry.register(obj, [Codec])
        assert isinstance(descriptor, InstanceDescriptor)
        assert descriptor.resolve() is obj

    def test_register_singleton_flag(self, spi_registry):
        descriptor = spi_registry.register(P1, [Codec], singleton=True)
        assert descriptor.singleton is True

    def test_register_existing_descriptor(self, spi_registry):
        descriptor = ClassDescriptor(P1)
        assert spi_registry.register(descriptor, [Codec]) is descriptor

    def test_same_descriptor_under_several_contracts(self, spi_registry):
        descriptor = spi_registry.register(Multi, [Codec, Compressor, Hasher])
        assert spi_registry.lookup(Codec) == (descriptor,)
        assert spi_registry.lookup(Compressor) == (descriptor,)
        assert spi_registry.lookup(Hasher) == (descriptor,)

    def test_priority_padding_per_contract(self, spi_registry):
        spi_registry.register(Multi, [Codec, Compressor, Hasher], [7])
        assert spi_registry.entries(Codec)[0].priority == 7
        assert spi_registry.entries(Compressor)[0].priority == 0
        assert spi_registry.entries(Hasher)[0].priority == 0

    def test_excess_priorities_discarded(self, spi_registry):
        spi_registry.register(P1, [Codec], [3, 9, 9])
        assert [e.priority for e in spi_registry.entries(Codec)] == [3]

    def test_no_deduplication(self, spi_registry):
        spi_registry.register(P1, [Codec])
        spi_registry.register(P1, [Codec])
        assert len(spi_registry.lookup(Codec)) == 2

    @pytest.mark.parametrize("contracts", [[], (), None])
    def test_empty_contracts_rejected(self, spi_registry, contracts):
        with pytest.raises(InvalidDescriptorFault) as exc_info:
            spi_registry.register(P1, contracts)
        assert exc_info.value.code == "INVALID_DESCRIPTOR"
        assert len(spi_registry) == 0

    def test_none_contract_rejected(self, spi_registry):
        with pytest.raises(InvalidDescriptorFault):
            spi_registry.register(P1, [Codec, None])
        assert spi_registry.lookup(Codec) == ()

    def test_non_class_contract_rejected(self, spi_registry):
        with pytest.raises(InvalidDescriptorFault):
            spi_registry.register(P1, ["Codec"])

    @pytest.mark.parametrize("priority", ["high", 1.5, True])
    def test_non_integer_priority_rejected(self, spi_registry, priority):
        with pytest.raises(InvalidDescriptorFault):
            spi_registry.register(P1, [Codec], [priority])


# ============================================================================
# Lookup & ordering
# ============================================================================

class TestLookup:

    def test_unknown_contract_is_empty(self, spi_registry):
        assert spi_registry.lookup(Codec) == ()
        assert spi_registry.entries(Codec) == ()
        assert spi_registry.is_registered(Codec) is False

    def test_descending_priority_stable_on_ties(self, spi_registry):
        d1 = spi_registry.register(P1, [Codec], [5])
        d2 = spi_registry.register(P2, [Codec], [10])
        d3 = spi_registry.register(P3, [Codec], [5])
        assert spi_registry.lookup(Codec) == (d2, d1, d3)

    def test_registration_order_without_priorities(self, spi_registry):
        descriptors = [spi_registry.register(cls, [Codec]) for cls in (P3, P1, P2)]
        assert spi_registry.lookup(Codec) == tuple(descriptors)

    def test_negative_priorities_sort_last(self, spi_registry):
        low = spi_registry.register(P1, [Codec], [-1])
        default = spi_registry.register(P2, [Codec])
        assert spi_registry.lookup(Codec) == (default, low)

    def test_entries_carry_sequence(self, spi_registry):
        spi_registry.register(P1, [Codec])
        spi_registry.register(P2, [Codec])
        first, second = spi_registry.entries(Codec)
        assert isinstance(first, RegistryEntry)
        assert first.sequence < second.sequence

    def test_lookup_is_a_snapshot(self, spi_registry):
        spi_registry.register(P1, [Codec])
        snapshot = spi_registry.lookup(Codec)
        spi_registry.register(P2, [Codec])
        assert len(snapshot) == 1
        assert len(spi_registry.lookup(Codec)) == 2

    def test_contracts_and_len(self, spi_registry):
        spi_registry.register(P1, [Codec])
        spi_registry.register(Multi, [Hasher, Codec])
        assert spi_registry.contracts() == (Codec, Hasher)
        assert len(spi_registry) == 2
        assert Hasher in spi_registry
        assert Compressor not in spi_registry


# ============================================================================
# Default registry
# ============================================================================

class TestDefaultRegistry:

    def test_lazily_created_and_stable(self):
        registry = get_default_registry()
        assert isinstance(registry, ServiceRegistry)
        assert get_default_registry() is registry

    def test_set_default_returns_previous(self):
        original = get_default_registry()
        replacement = ServiceRegistry()
        assert set_default_registry(replacement) is original
        assert get_default_registry() is replacement

    def test_isolated_fixture_installs_registry(self, default_spi_registry):
        assert get_default_registry() is default_spi_registry
