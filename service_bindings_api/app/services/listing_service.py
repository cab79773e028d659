"""
Service layer for the binding listing.

Bindings are fetched from the injected accessor, projected to
``ServiceBindingView`` objects and rendered as one text line each::

    Service instance name: <name>, service plan: <plan>

An absent name or plan is rendered as ``missing``.  Lines keep the
accessor's discovery order and every line ends with a newline, so an
empty registry renders as an empty string.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from fastapi.concurrency import run_in_threadpool

from service_bindings_api.app.schemas.binding import ServiceBindingView
from service_bindings_api.app.services.binding_accessor import (
    BindingResolutionError,
    ServiceBindingAccessor,
)

MISSING = "missing"


class ServiceListingService:
    """Build the plain text listing of discovered service bindings."""

    @classmethod
    async def list_views(cls, accessor: ServiceBindingAccessor) -> List[ServiceBindingView]:
        """Return a view per binding, in discovery order.

        Any failure of the accessor is raised as
        ``BindingResolutionError`` so callers can handle it as one
        distinct error.
        """
        logger = logging.getLogger(__name__)
        try:
            # Accessors may scan the filesystem; keep that off the event loop.
            bindings = await run_in_threadpool(accessor.get_service_bindings)
        except BindingResolutionError:
            raise
        except Exception as exc:
            raise BindingResolutionError(f"Service binding accessor failed: {exc}") from exc
        logger.debug("Listing %d service binding(s)", len(bindings))
        return [ServiceBindingView.from_binding(binding) for binding in bindings]

    @staticmethod
    def render_line(view: ServiceBindingView) -> str:
        name = view.name if view.name is not None else MISSING
        plan = view.plan if view.plan is not None else MISSING
        return f"Service instance name: {name}, service plan: {plan}\n"

    @classmethod
    def render_listing(cls, views: Iterable[ServiceBindingView]) -> str:
        return "".join(cls.render_line(view) for view in views)

    @classmethod
    async def get_listing(cls, accessor: ServiceBindingAccessor) -> str:
        """Fetch and render the listing in one call."""
        views = await cls.list_views(accessor)
        return cls.render_listing(views)
