"""Client configuration for fleettrack."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from fleettrack._constants import (
    BASE_URL,
    DEFAULT_MQTT_TOPIC,
    HEARTBEAT_INTERVAL,
    HEARTBEAT_TIMEOUT,
    JUST_UPDATED_LABEL,
)
from fleettrack.exceptions import FleetConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value.strip())
    except ValueError as exc:
        raise FleetConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Fleet REST API base URL (vehicle list, devices, predictions).
    api_token : str or None
        Optional bearer token sent with every API request.
    request_timeout : float
        Total timeout in seconds for a single REST request.
    prediction_timeout : float
        Seconds to wait for a prediction before raising
        :class:`~fleettrack.exceptions.PredictionTimeoutError`.
    just_updated_label : str
        Recency label written to a vehicle whenever an update is merged.
    heartbeat_timeout : float
        Seconds without an applied update before a vehicle is reported as
        possibly offline.
    heartbeat_interval : float
        Seconds between heartbeat checks while live updates run.
    mqtt_enabled : bool
        Start the MQTT live update listener when the client opens.
    mqtt_host : str
        MQTT broker host.
    mqtt_port : int
        MQTT broker port.
    mqtt_topic : str
        Topic filter carrying vehicle update payloads.
    mqtt_username : str or None
        Broker username, if the broker requires authentication.
    mqtt_password : str or None
        Broker password.
    mqtt_tls : bool
        Enable TLS for the broker connection.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    api_trace_enabled : bool
        Log request and response bodies (redacted) at DEBUG level.
    """

    base_url: str = BASE_URL
    api_token: str | None = None
    request_timeout: float = 10.0
    prediction_timeout: float = 30.0
    just_updated_label: str = JUST_UPDATED_LABEL
    heartbeat_timeout: float = HEARTBEAT_TIMEOUT
    heartbeat_interval: float = HEARTBEAT_INTERVAL
    mqtt_enabled: bool = False
    mqtt_host: str = "localhost"
    mqtt_port: int = 1883
    mqtt_topic: str = DEFAULT_MQTT_TOPIC
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    mqtt_tls: bool = False
    mqtt_keepalive: int = 60
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise FleetConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.prediction_timeout <= 0:
            raise FleetConfigError(f"prediction_timeout must be positive, got {self.prediction_timeout}")
        if self.heartbeat_timeout <= 0:
            raise FleetConfigError(f"heartbeat_timeout must be positive, got {self.heartbeat_timeout}")
        if self.heartbeat_interval <= 0:
            raise FleetConfigError(f"heartbeat_interval must be positive, got {self.heartbeat_interval}")
        if not 1 <= self.mqtt_port <= 65535:
            raise FleetConfigError(f"mqtt_port must be between 1 and 65535, got {self.mqtt_port}")
        if not self.base_url.strip():
            raise FleetConfigError("base_url must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from environment variables.

        Reads optional ``FLEETTRACK_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        FleetConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FLEETTRACK_BASE_URL": "base_url",
            "FLEETTRACK_API_TOKEN": "api_token",
            "FLEETTRACK_JUST_UPDATED_LABEL": "just_updated_label",
            "FLEETTRACK_MQTT_HOST": "mqtt_host",
            "FLEETTRACK_MQTT_TOPIC": "mqtt_topic",
            "FLEETTRACK_MQTT_USERNAME": "mqtt_username",
            "FLEETTRACK_MQTT_PASSWORD": "mqtt_password",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "FLEETTRACK_REQUEST_TIMEOUT": ("request_timeout", float),
            "FLEETTRACK_PREDICTION_TIMEOUT": ("prediction_timeout", float),
            "FLEETTRACK_HEARTBEAT_TIMEOUT": ("heartbeat_timeout", float),
            "FLEETTRACK_HEARTBEAT_INTERVAL": ("heartbeat_interval", float),
            "FLEETTRACK_MQTT_PORT": ("mqtt_port", int),
            "FLEETTRACK_MQTT_KEEPALIVE": ("mqtt_keepalive", int),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        _ENV_BOOL_MAP = {
            "FLEETTRACK_MQTT_ENABLED": ("mqtt_enabled", False),
            "FLEETTRACK_MQTT_TLS": ("mqtt_tls", False),
            "FLEETTRACK_API_TRACE_ENABLED": ("api_trace_enabled", False),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
