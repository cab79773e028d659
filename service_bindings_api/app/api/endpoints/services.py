"""
Service binding listing endpoint.

``GET /services`` returns one plain text line per service binding
visible to the application::

    Service instance name: my-db, service plan: small

A binding without a name or plan shows ``missing`` in its place.
When the bindings cannot be resolved the endpoint answers 503 rather
than an empty listing, so clients can tell "no bindings" apart from
"bindings unavailable".
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from service_bindings_api.app.core.dependencies import get_binding_accessor
from service_bindings_api.app.services.binding_accessor import (
    BindingResolutionError,
    ServiceBindingAccessor,
)
from service_bindings_api.app.services.listing_service import ServiceListingService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_class=PlainTextResponse)
async def get_services(
    accessor: ServiceBindingAccessor = Depends(get_binding_accessor),
) -> PlainTextResponse:
    """Return the newline terminated listing of service bindings."""
    try:
        listing = await ServiceListingService.get_listing(accessor)
    except BindingResolutionError as exc:
        logger.error("Unable to resolve service bindings: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to resolve service bindings",
        ) from exc
    return PlainTextResponse(listing)
