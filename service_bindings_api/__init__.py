"""
Top‑level package for the Service Bindings API.

The web application lives under ``app``; the ``service-bindings``
command line entry point lives in ``cli``.
"""

__all__ = []
