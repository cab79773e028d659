"""
Translate ``VCAP_SERVICES`` into a servicebinding.io binding root.

Cloud Foundry publishes bindings as one JSON document, while
Kubernetes style libraries expect a directory tree under
``SERVICE_BINDING_ROOT``.  ``translate_vcap_services`` writes that
tree so both kinds of consumers see the same bindings:

* ``<root>/<binding name>/<credential name>`` holds the credential
  value.  Strings are written verbatim, anything else as JSON.
* A ``type`` file is written from the service label when the
  credentials do not carry their own ``type``.

While translating, the first binding with a ``uri`` credential that
names a MySQL or PostgreSQL database also provides ``DATABASE_URL``,
unless one is already set.  The scheme is normalised to what
ActiveRecord style drivers expect (``mysql2``, ``postgres``).

The environment is passed in as a mapping so callers decide whether
to update ``os.environ`` or a copy of it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, MutableMapping, Optional
from urllib.parse import urlsplit

from service_bindings_api.app.services.binding_accessor import (
    BindingResolutionError,
    parse_vcap_services,
)

logger = logging.getLogger(__name__)

DATABASE_URL_ENV = "DATABASE_URL"
SERVICE_BINDING_ROOT_ENV = "SERVICE_BINDING_ROOT"

# Accepted database URI schemes and their normalised form.
DATABASE_SCHEMES = {
    "mysql": "mysql2",
    "mysql2": "mysql2",
    "postgres": "postgres",
    "postgresql": "postgres",
}


def convert_database_uri(uri: Any) -> str:
    """Return ``uri`` with a normalised database scheme, or ``""``.

    Non-string values, unparsable URIs and schemes other than the
    MySQL and PostgreSQL ones give an empty string.
    """
    if not isinstance(uri, str):
        return ""
    try:
        parts = urlsplit(uri)
    except ValueError:
        return ""
    scheme = DATABASE_SCHEMES.get(parts.scheme)
    if scheme is None:
        return ""
    # Only the scheme changes; urlunsplit would drop "//" for host-less URIs.
    return scheme + uri[len(parts.scheme):]


def database_uri_from_services(vcap_services: Optional[str]) -> str:
    """Return the first convertible ``credentials.uri`` in the document."""
    for binding in parse_vcap_services(vcap_services):
        converted = convert_database_uri(binding.credentials.get("uri"))
        if converted:
            return converted
    return ""


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _binding_directory(binding_root: Path, name: Optional[str]) -> Path:
    if not name or name in {".", ".."} or "/" in name or "\\" in name:
        raise BindingResolutionError(f"Invalid service binding name: {name!r}")
    return binding_root / name


def translate_vcap_services(
    vcap_services: Optional[str],
    binding_root: Path,
    environ: MutableMapping[str, str],
) -> List[Path]:
    """Write each ``VCAP_SERVICES`` binding under ``binding_root``.

    Returns the binding directories that were written.  An empty or
    ``{}`` document is a no-op and leaves ``environ`` untouched.
    Otherwise ``SERVICE_BINDING_ROOT`` is set to ``binding_root`` and
    ``DATABASE_URL`` is filled in when it is empty and a database URI
    is found.

    Raises
    ------
    BindingResolutionError
        If the document cannot be parsed, a binding name cannot be used
        as a directory name, or the files cannot be written.
    """
    if not vcap_services or vcap_services.strip() in {"", "{}"}:
        return []

    bindings = parse_vcap_services(vcap_services)
    binding_root = Path(binding_root)
    environ[SERVICE_BINDING_ROOT_ENV] = str(binding_root)

    written: List[Path] = []
    try:
        binding_root.mkdir(parents=True, exist_ok=True)
        for binding in bindings:
            directory = _binding_directory(binding_root, binding.name)
            directory.mkdir(parents=True, exist_ok=True)
            credentials = dict(binding.credentials)
            if "type" not in credentials and binding.label:
                credentials["type"] = binding.label
            for key, value in credentials.items():
                if not key or "/" in key or "\\" in key or key in {".", ".."}:
                    raise BindingResolutionError(
                        f"Invalid credential name {key!r} in binding {binding.name!r}"
                    )
                (directory / key).write_text(_stringify(value), encoding="utf-8")
            written.append(directory)

            if not environ.get(DATABASE_URL_ENV):
                database_url = convert_database_uri(credentials.get("uri"))
                if database_url:
                    environ[DATABASE_URL_ENV] = database_url
                    logger.info("DATABASE_URL derived from binding %s", binding.name)
    except OSError as exc:
        raise BindingResolutionError(f"Unable to write binding root {binding_root}: {exc}") from exc

    logger.info("Translated %d binding(s) into %s", len(written), binding_root)
    return written
