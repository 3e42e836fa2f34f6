# registry.py
"""
registry.py
-----------
Named, shared orchestrator instances.

Holds in-memory orchestrators keyed by name, so separate parts of an
application can share one concurrency budget and one set of defaults
without passing the instance around.

Instances are still independent of each other: "default" and "billing"
have their own gate, defaults and cancellation controller.
"""

import logging
from typing import Any

from orchestrator.client import RequestOrchestrator, create_orchestrator

logger = logging.getLogger(__name__)

# key: instance name
# value: RequestOrchestrator
_instances: dict[str, RequestOrchestrator] = {}


def get_orchestrator(name: str = "default", config: Any = None, **overrides: Any) -> RequestOrchestrator:
    """
    Get or create the orchestrator registered as ``name``.
    ``config`` and ``overrides`` (see create_orchestrator) are used only on creation.
    """
    if name in _instances:
        return _instances[name]
    orchestrator = create_orchestrator(config, **overrides)
    _instances[name] = orchestrator
    logger.debug(f"Registered orchestrator {name!r}: {orchestrator!r}")
    return orchestrator


def drop_orchestrator(name: str) -> RequestOrchestrator | None:
    """Forget ``name`` and return its orchestrator (not closed), or None if unknown."""
    return _instances.pop(name, None)


def registered_names() -> list[str]:
    return sorted(_instances)


async def close_all() -> None:
    """Close and forget every registered orchestrator."""
    while _instances:
        name, orchestrator = _instances.popitem()
        await orchestrator.aclose()
        logger.debug(f"Closed orchestrator {name!r}")
