"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  Each
field is read when a ``Settings`` instance is created, so tests and
the command line can build fresh settings after changing the
environment.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env(name: str, default: Optional[str] = None):
    return field(default_factory=lambda: os.getenv(name, default))


def _env_bool(name: str, default: str = "false"):
    return field(default_factory=lambda: os.getenv(name, default).lower() in {"1", "true", "yes"})


def _env_int(name: str, default: str):
    return field(default_factory=lambda: int(os.getenv(name, default)))


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = _env("PROJECT_NAME", "Service Bindings API")
    api_version: str = _env("API_VERSION", "1.0.0")
    debug: bool = _env_bool("DEBUG")
    log_level: str = _env("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to the console handler.
    log_file: Optional[str] = _env("LOG_FILE")

    host: str = _env("HOST", "0.0.0.0")
    port: int = _env_int("PORT", "8080")

    # Raw JSON document published by the platform.  ``None`` or an
    # empty object means no bindings from this source.
    vcap_services: Optional[str] = _env("VCAP_SERVICES")

    # Directory holding one sub-directory per binding
    # (servicebinding.io layout).
    service_binding_root: Optional[str] = _env("SERVICE_BINDING_ROOT")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
