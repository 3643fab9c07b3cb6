"""
Spinel Diagnostics - Observability and event tracking for the registry.
"""

import time
from typing import Any, Dict, List, Optional, Protocol
from enum import Enum
import dataclasses
import logging

logger = logging.getLogger("spinel.diagnostics")


class DiagnosticEventType(Enum):
    """Types of registry events."""
    REGISTRATION = "registration"
    LOAD_SUCCESS = "load_success"
    LOAD_FAILURE = "load_failure"
    DISCOVERY = "discovery"


@dataclasses.dataclass
class DiagnosticEvent:
    """A diagnostic event in the registry."""
    type: DiagnosticEventType
    timestamp: float = dataclasses.field(default_factory=time.time)
    contract: Optional[Any] = None
    provider_name: Optional[str] = None
    priority: Optional[int] = None
    count: Optional[int] = None
    duration: Optional[float] = None
    error: Optional[Exception] = None
    metadata: Dict[str, Any] = dataclasses.field(default_factory=dict)


class DiagnosticListener(Protocol):
    """Interface for diagnostic listeners."""
    def on_event(self, event: DiagnosticEvent) -> None:
        """Called when a registry event occurs."""
        ...


def _contract_name(contract: Any) -> str:
    return getattr(contract, "__qualname__", repr(contract))


class LoggingDiagnosticListener:
    """Diagnostic listener that writes events to the ``spinel.diagnostics`` logger."""

    def __init__(self, log_level: int = logging.DEBUG):
        self.log_level = log_level

    def on_event(self, event: DiagnosticEvent) -> None:
        if event.type == DiagnosticEventType.REGISTRATION:
            logger.log(
                self.log_level,
                "Registered provider '%s' for contract=%s (priority=%s)",
                event.provider_name, _contract_name(event.contract), event.priority,
            )
        elif event.type == DiagnosticEventType.LOAD_SUCCESS:
            logger.log(
                self.log_level,
                "Loaded %s provider(s) for contract=%s in %.4fs",
                event.count, _contract_name(event.contract), event.duration,
            )
        elif event.type == DiagnosticEventType.LOAD_FAILURE:
            logger.log(
                logging.ERROR,
                "Failed to load contract=%s: %s",
                _contract_name(event.contract), event.error,
            )
        elif event.type == DiagnosticEventType.DISCOVERY:
            logger.log(
                logging.INFO,
                "Discovered %s provider(s) in %s",
                event.count, event.metadata.get("packages", []),
            )


class Diagnostics:
    """Coordinator for diagnostic listeners."""

    def __init__(self):
        self._listeners: List[DiagnosticListener] = []

    def add_listener(self, listener: DiagnosticListener) -> None:
        """Add a diagnostic listener."""
        self._listeners.append(listener)

    def remove_listener(self, listener: DiagnosticListener) -> None:
        """Remove a previously added listener."""
        self._listeners.remove(listener)

    def emit(self, event_type: DiagnosticEventType, **kwargs) -> None:
        """Emit a diagnostic event to all listeners."""
        if not self._listeners:
            return
        event = DiagnosticEvent(type=event_type, **kwargs)
        for listener in list(self._listeners):
            try:
                listener.on_event(event)
            except Exception as e:
                # Diagnostics should never break registration or loading
                logger.error("Diagnostic listener error: %s", e)

    def measure(self, **kwargs) -> "_LoadMeasure":
        """Context manager that emits LOAD_SUCCESS or LOAD_FAILURE with duration."""
        return _LoadMeasure(self, **kwargs)


class _LoadMeasure:
    def __init__(self, diagnostics: Diagnostics, **kwargs):
        self.diagnostics = diagnostics
        self.kwargs = kwargs
        self.start_time = None

    def update(self, **kwargs) -> None:
        """Attach extra event fields discovered while measuring."""
        self.kwargs.update(kwargs)

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.perf_counter() - self.start_time
        if exc_type:
            self.diagnostics.emit(
                DiagnosticEventType.LOAD_FAILURE,
                duration=duration,
                error=exc_val,
                **self.kwargs
            )
        else:
            self.diagnostics.emit(
                DiagnosticEventType.LOAD_SUCCESS,
                duration=duration,
                **self.kwargs
            )
        return False
