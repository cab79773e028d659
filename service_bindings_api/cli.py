"""
Command line entry point for the Service Bindings API.

Usage:
    service-bindings serve [--host 0.0.0.0] [--port 8080]
    service-bindings list
    service-bindings translate --binding-root /tmp/bindings

``serve`` runs the HTTP API with uvicorn.  ``list`` prints the same
text ``GET /services`` returns.  ``translate`` writes the bindings
found in ``VCAP_SERVICES`` as a servicebinding.io tree and prints the
resulting ``SERVICE_BINDING_ROOT`` and ``DATABASE_URL`` assignments,
suitable for ``eval`` in a launcher script.

Configuration is read from the environment, see ``core.config``.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import List, Optional

from uvicorn import Config, Server

from service_bindings_api.app.core.config import Settings
from service_bindings_api.app.core.logging_config import setup_logging
from service_bindings_api.app.main import create_app
from service_bindings_api.app.services.binding_accessor import (
    BindingResolutionError,
    build_default_accessor,
)
from service_bindings_api.app.services.listing_service import ServiceListingService
from service_bindings_api.app.services.vcap_translator import (
    DATABASE_URL_ENV,
    SERVICE_BINDING_ROOT_ENV,
    translate_vcap_services,
)


async def serve(settings: Settings, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Start the API using Uvicorn."""
    app = create_app(settings)
    config = Config(
        app=app,
        host=host if host is not None else settings.host,
        port=port if port is not None else settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


def _list(settings: Settings) -> int:
    accessor = build_default_accessor(settings)
    listing = asyncio.run(ServiceListingService.get_listing(accessor))
    sys.stdout.write(listing)
    return 0


def _translate(settings: Settings, binding_root: str) -> int:
    translate_vcap_services(settings.vcap_services, Path(binding_root), os.environ)
    for name in (SERVICE_BINDING_ROOT_ENV, DATABASE_URL_ENV):
        value = os.environ.get(name)
        if value:
            print(f"{name}={value}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="service-bindings", description="List and translate service bindings.")
    sub = ap.add_subparsers(dest="command", required=True)

    serve_ap = sub.add_parser("serve", help="Run the HTTP API")
    serve_ap.add_argument("--host", help="Interface to bind (default: HOST or 0.0.0.0)")
    serve_ap.add_argument("--port", type=int, help="Port to listen on (default: PORT or 8080)")

    sub.add_parser("list", help="Print the service binding listing")

    translate_ap = sub.add_parser("translate", help="Write VCAP_SERVICES as a binding root")
    translate_ap.add_argument(
        "--binding-root",
        required=True,
        help="Directory to write bindings into (becomes SERVICE_BINDING_ROOT)",
    )
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()

    if args.command == "serve":
        try:
            asyncio.run(serve(settings, args.host, args.port))
        except (KeyboardInterrupt, SystemExit):
            pass
        return 0

    setup_logging(settings.log_level, settings.log_file)
    try:
        if args.command == "list":
            return _list(settings)
        return _translate(settings, args.binding_root)
    except BindingResolutionError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
