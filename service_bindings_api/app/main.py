"""
Main entrypoint for the Service Bindings API.

This module assembles the FastAPI application, sets up logging and
includes the API router.  ``create_app`` builds and configures the
app; an instance is created at import time as ``app`` so it can be
served directly, e.g.::

    uvicorn service_bindings_api.app.main:app

The binding accessor is passed in explicitly.  When none is given,
one is built from ``Settings`` with ``build_default_accessor``.
"""

import logging
from typing import Optional

from fastapi import FastAPI

from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .services.binding_accessor import ServiceBindingAccessor, build_default_accessor


def create_app(
    settings: Optional[Settings] = None,
    accessor: Optional[ServiceBindingAccessor] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Application settings.  Defaults to the module level settings
        read from the environment at import time.
    accessor : Optional[ServiceBindingAccessor]
        Source of service bindings for every request.  Defaults to
        the combined ``VCAP_SERVICES`` and ``SERVICE_BINDING_ROOT``
        accessor built from ``settings``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file)

    if accessor is None:
        accessor = build_default_accessor(settings)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.settings = settings
    app.state.binding_accessor = accessor
    app.include_router(api_router)

    logging.getLogger(__name__).info(
        "Created %s using %s", settings.project_name, type(accessor).__name__
    )
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
