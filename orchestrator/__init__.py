"""Client-side HTTP request orchestration: concurrency limit, defaults, cancellation and recall."""

from .cancellation import CancellationController
from .client import RequestOrchestrator, create_orchestrator
from .defaults import DefaultStore
from .errors import AuroraError, ClassError, ClassifiedError, InstanceError
from .gate import ConcurrencyGate
from .models import CallOptions, ClientConfig, RequestResult, load_config
from .urls import normalize_url

__all__ = [
    "AuroraError",
    "CallOptions",
    "CancellationController",
    "ClassError",
    "ClassifiedError",
    "ClientConfig",
    "ConcurrencyGate",
    "DefaultStore",
    "InstanceError",
    "RequestOrchestrator",
    "RequestResult",
    "create_orchestrator",
    "load_config",
    "normalize_url",
]
