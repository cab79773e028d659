"""
Request dependencies.

The binding accessor is created once by ``create_app`` and stored on
``app.state``.  Endpoints receive it through ``Depends`` instead of
reaching for a process-wide default.
"""

from fastapi import Request

from service_bindings_api.app.services.binding_accessor import ServiceBindingAccessor


def get_binding_accessor(request: Request) -> ServiceBindingAccessor:
    """Return the accessor the application was built with."""
    return request.app.state.binding_accessor
