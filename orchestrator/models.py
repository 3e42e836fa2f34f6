"""Models for orchestrator configuration, per-call options and request results."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping

import httpx
import yaml
from box import Box
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ClassifiedError, InstanceError


class ClientConfig(BaseModel):
    """Serializable configuration of one orchestrator."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = Field("", description="Prefix joined with every endpoint")
    max_concurrent_requests: int | None = Field(None, description="In-flight limit; 0 or None is unbounded")
    timeout: int | None = Field(None, ge=0, description="Default timeout in milliseconds")
    headers: dict[str, str] = Field(default_factory=dict, description="Default headers")
    params: dict[str, Any] = Field(default_factory=dict, description="Default query parameters")


class CallOptions(Box):
    """
    Options of a single call, as a dot-access dict.
    Known keys: endpoint, headers, params, body, timeout, cancellation, loading_callback.
    Any other key is passed to the transport untouched.
    Examples:
        options = CallOptions(endpoint="/items", params={"page": 2})
        options.endpoint           # '/items'
        options["params"]["page"]  # 2
    """


@dataclass
class RequestResult:
    """Outcome of one call. Exactly one of ``response`` / ``error`` is set."""

    response: httpx.Response | None = None
    error: ClassifiedError | None = None
    has_error: bool = False
    _recaller: Callable[[Mapping[str, Any]], Awaitable[RequestResult]] | None = field(
        default=None, repr=False, compare=False
    )

    async def recall(self, custom_options: Mapping[str, Any] | None = None, **overrides: Any) -> RequestResult:
        """Issue the same call again with ``custom_options`` / ``overrides`` laid over the original options.

        Current defaults of the orchestrator apply, and admission is checked again.
        """
        if self._recaller is None:
            raise InstanceError("This result has no call to recall")
        merged = dict(custom_options or {})
        merged.update(overrides)
        return await self._recaller(merged)


# ---------------------------------------------------------------------------
# helpers


def load_config(source: Any = None) -> ClientConfig:
    """Normalize supported inputs into a ClientConfig instance.

    Accepts a ClientConfig, a mapping, a Path to a YAML/JSON file, or raw YAML/JSON text.
    """
    if source is None:
        return ClientConfig()
    if isinstance(source, ClientConfig):
        return source
    payload: Mapping[str, Any]
    if isinstance(source, Mapping):
        payload = source
    elif isinstance(source, Path):
        try:
            payload = _load_text_payload(source.read_text())
        except OSError as exc:
            raise InstanceError(f"Cannot read config file {source}: {exc}") from exc
    elif isinstance(source, (str, bytes)):
        payload = _load_text_payload(source)
    else:
        raise TypeError("Unsupported value for client configuration")
    if not isinstance(payload, Mapping):
        raise InstanceError("Client configuration must be a mapping")
    try:
        return ClientConfig.model_validate(dict(payload))
    except ValidationError as exc:
        raise InstanceError(f"Invalid client configuration: {exc}") from exc


def _load_text_payload(raw: str | bytes) -> Any:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise InstanceError(f"Client configuration is neither YAML nor JSON: {exc}") from exc


__all__ = [
    "CallOptions",
    "ClientConfig",
    "RequestResult",
    "load_config",
]
