"""
API package containing the HTTP routes.

``router.py`` aggregates the per-domain routers from ``endpoints``
and is included by ``create_app``.
"""
