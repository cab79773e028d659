"""
Application package initializer.

The code is split into ``core`` (settings, logging, dependencies),
``schemas`` (pydantic models), ``services`` (binding discovery,
rendering and VCAP translation) and ``api`` (HTTP routes).
"""

from .main import app  # noqa: F401
