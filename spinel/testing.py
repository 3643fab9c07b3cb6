"""
Testing utilities for the service registry.
"""

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from .diagnostics import DiagnosticEvent
from .registry import ServiceRegistry, set_default_registry


class RecordingListener:
    """Diagnostic listener that keeps every event for assertions."""

    def __init__(self):
        self.events: List[DiagnosticEvent] = []

    def on_event(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: Any) -> List[DiagnosticEvent]:
        return [event for event in self.events if event.type == event_type]

    def reset(self) -> None:
        self.events.clear()


@contextmanager
def isolated_registry(registry: Optional[ServiceRegistry] = None) -> Iterator[ServiceRegistry]:
    """
    Temporarily replace the process-wide registry.

    Example:
        with isolated_registry() as registry:
            registry.register(FakeCodec, [Codec])
            assert load(Codec).list()
    """
    registry = registry if registry is not None else ServiceRegistry()
    previous = set_default_registry(registry)
    try:
        yield registry
    finally:
        set_default_registry(previous)


# Pytest fixtures (if pytest is available)
try:
    import pytest

    @pytest.fixture
    def spi_registry():
        """Provide a clean, standalone registry."""
        return ServiceRegistry()

    @pytest.fixture
    def default_spi_registry():
        """Provide a clean registry installed as the process-wide default."""
        with isolated_registry() as registry:
            yield registry

except ImportError:
    # pytest not available - skip fixtures
    pass
