import asyncio
import threading

import pytest

from service_bindings_api.app.schemas.binding import ServiceBinding, ServiceBindingView
from service_bindings_api.app.services.binding_accessor import (
    BindingResolutionError,
    StaticServiceBindingAccessor,
)
from service_bindings_api.app.services.listing_service import ServiceListingService

from .conftest import FailingAccessor


def listing_for(*bindings: ServiceBinding) -> str:
    accessor = StaticServiceBindingAccessor(bindings)
    return asyncio.run(ServiceListingService.get_listing(accessor))


def test_no_bindings_render_empty_string():
    assert listing_for() == ""


def test_name_and_plan_are_rendered():
    assert listing_for(ServiceBinding(name="X", plan="Y")) == "Service instance name: X, service plan: Y\n"


def test_absent_name_renders_missing():
    assert listing_for(ServiceBinding(plan="Y")) == "Service instance name: missing, service plan: Y\n"


def test_absent_plan_renders_missing():
    assert listing_for(ServiceBinding(name="X")) == "Service instance name: X, service plan: missing\n"


def test_absent_name_and_plan_render_missing():
    line = ServiceListingService.render_line(ServiceBindingView())
    assert line == "Service instance name: missing, service plan: missing\n"


def test_empty_string_values_are_kept():
    line = ServiceListingService.render_line(ServiceBindingView(name="", plan=""))
    assert line == "Service instance name: , service plan: \n"


def test_one_line_per_binding_in_discovery_order():
    names = ["c", "a", "b"]
    listing = listing_for(*[ServiceBinding(name=name, plan="p") for name in names])
    lines = listing.splitlines()
    assert len(lines) == 3
    assert [line.split(",")[0] for line in lines] == [f"Service instance name: {name}" for name in names]
    assert listing.endswith("\n")


def test_views_only_carry_name_and_plan():
    binding = ServiceBinding(name="db", plan="small", label="postgres", credentials={"password": "secret"})
    views = asyncio.run(ServiceListingService.list_views(StaticServiceBindingAccessor([binding])))
    assert views == [ServiceBindingView(name="db", plan="small")]


def test_unexpected_accessor_error_is_wrapped():
    accessor = FailingAccessor(RuntimeError("registry down"))
    with pytest.raises(BindingResolutionError) as excinfo:
        asyncio.run(ServiceListingService.list_views(accessor))
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_resolution_error_is_propagated_unchanged():
    error = BindingResolutionError("bad document")
    with pytest.raises(BindingResolutionError) as excinfo:
        asyncio.run(ServiceListingService.list_views(FailingAccessor(error)))
    assert excinfo.value is error


def test_accessor_runs_outside_the_event_loop_thread():
    calls = []

    class RecordingAccessor(StaticServiceBindingAccessor):
        def get_service_bindings(self):
            calls.append(threading.get_ident())
            return super().get_service_bindings()

    asyncio.run(ServiceListingService.list_views(RecordingAccessor([ServiceBinding(name="db")])))

    assert len(calls) == 1
    assert calls[0] != threading.get_ident()
