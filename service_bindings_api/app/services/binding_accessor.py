"""
Service binding discovery.

An accessor answers one question: which service bindings does this
process currently see?  Two platform sources are supported:

* ``VCAP_SERVICES``: a JSON object mapping service labels to lists
  of binding entries, as published by Cloud Foundry.
* ``SERVICE_BINDING_ROOT``: a directory with one sub-directory per
  binding and one file per credential (servicebinding.io layout).

``build_default_accessor`` combines both from ``Settings``.  The
result is handed to ``create_app`` explicitly; there is no global
accessor instance.

Every source re-reads its input on each call.  Accessors keep only
immutable configuration, so one instance can serve concurrent
requests.  Failures to read or parse a source raise
``BindingResolutionError``.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, List, Optional

from service_bindings_api.app.core.config import Settings
from service_bindings_api.app.schemas.binding import ServiceBinding

logger = logging.getLogger(__name__)

# Files in a binding directory that describe the binding rather than
# carry a credential.
_METADATA_FILES = {"type", "provider"}


class BindingResolutionError(Exception):
    """Raised when the current service bindings cannot be resolved."""


class ServiceBindingAccessor(ABC):
    """Source of the service bindings visible to the process."""

    @abstractmethod
    def get_service_bindings(self) -> List[ServiceBinding]:
        """Return the current bindings in discovery order."""


class StaticServiceBindingAccessor(ServiceBindingAccessor):
    """Accessor over a fixed list of bindings."""

    def __init__(self, bindings: Iterable[ServiceBinding] = ()) -> None:
        self._bindings = list(bindings)

    def get_service_bindings(self) -> List[ServiceBinding]:
        return list(self._bindings)


def parse_vcap_services(vcap_services: Optional[str]) -> List[ServiceBinding]:
    """Parse a ``VCAP_SERVICES`` document into bindings.

    ``None``, an empty string or an empty object give an empty list.
    Groups and entries keep their document order.  An entry's label
    defaults to its group key and its type to the ``type`` credential,
    falling back to the label.
    """
    if not vcap_services or not vcap_services.strip():
        return []
    try:
        document = json.loads(vcap_services)
    except json.JSONDecodeError as exc:
        raise BindingResolutionError(f"VCAP_SERVICES is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise BindingResolutionError("VCAP_SERVICES must be a JSON object")

    bindings: List[ServiceBinding] = []
    for group, entries in document.items():
        if not isinstance(entries, list):
            raise BindingResolutionError(f"VCAP_SERVICES group {group!r} must be a list")
        for entry in entries:
            if not isinstance(entry, dict):
                raise BindingResolutionError(f"VCAP_SERVICES group {group!r} contains a non-object entry")
            bindings.append(_binding_from_vcap_entry(group, entry))
    return bindings


def _binding_from_vcap_entry(group: str, entry: dict) -> ServiceBinding:
    credentials = entry.get("credentials") or {}
    if not isinstance(credentials, dict):
        raise BindingResolutionError(f"credentials of binding {entry.get('name')!r} must be an object")
    label = entry.get("label") or group
    tags = entry.get("tags") or []
    return ServiceBinding(
        name=_optional_str(entry.get("name")),
        label=_optional_str(label),
        plan=_optional_str(entry.get("plan")),
        type=_optional_str(credentials.get("type")) or _optional_str(label),
        provider=_optional_str(entry.get("provider")),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
        credentials=credentials,
    )


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


class VcapServicesAccessor(ServiceBindingAccessor):
    """Accessor reading a ``VCAP_SERVICES`` JSON document."""

    def __init__(self, vcap_services: Optional[str]) -> None:
        self.vcap_services = vcap_services

    def get_service_bindings(self) -> List[ServiceBinding]:
        bindings = parse_vcap_services(self.vcap_services)
        logger.debug("Discovered %d binding(s) in VCAP_SERVICES", len(bindings))
        return bindings


class BindingRootAccessor(ServiceBindingAccessor):
    """Accessor reading a servicebinding.io style directory tree.

    Each non-hidden sub-directory of the root is one binding named
    after the directory.  The ``type`` and ``provider`` files fill the
    matching fields; every other non-hidden file is a credential, kept
    as text when it is UTF-8 and as ``bytes`` otherwise.
    Bindings are returned in sorted directory name order.  A missing
    or unset root yields no bindings.
    """

    def __init__(self, root: Optional[str]) -> None:
        self.root = Path(root) if root else None

    def get_service_bindings(self) -> List[ServiceBinding]:
        if self.root is None or not self.root.is_dir():
            return []
        try:
            entries = sorted(self.root.iterdir(), key=lambda p: p.name)
            bindings = [
                self._read_binding(entry)
                for entry in entries
                if entry.is_dir() and not entry.name.startswith(".")
            ]
        except OSError as exc:
            raise BindingResolutionError(f"Unable to read binding root {self.root}: {exc}") from exc
        logger.debug("Discovered %d binding(s) under %s", len(bindings), self.root)
        return bindings

    @staticmethod
    def _read_binding(directory: Path) -> ServiceBinding:
        metadata = {}
        credentials = {}
        for path in sorted(directory.iterdir(), key=lambda p: p.name):
            if path.name.startswith(".") or not path.is_file():
                continue
            raw = path.read_bytes()
            if path.name in _METADATA_FILES:
                metadata[path.name] = raw.decode("utf-8", errors="replace").strip()
                continue
            # Binary credentials such as keystores stay as bytes.
            try:
                credentials[path.name] = raw.decode("utf-8")
            except UnicodeDecodeError:
                credentials[path.name] = raw
        return ServiceBinding(
            name=directory.name,
            type=metadata.get("type") or None,
            provider=metadata.get("provider") or None,
            credentials=credentials,
        )


class CompositeServiceBindingAccessor(ServiceBindingAccessor):
    """Concatenate several accessors, keeping the first binding per name.

    A binding translated from ``VCAP_SERVICES`` into the binding root
    shows up in both sources; the earlier accessor wins.  Bindings
    without a name are always kept.
    """

    def __init__(self, accessors: Iterable[ServiceBindingAccessor]) -> None:
        self.accessors = list(accessors)

    def get_service_bindings(self) -> List[ServiceBinding]:
        seen = set()
        bindings: List[ServiceBinding] = []
        for accessor in self.accessors:
            for binding in accessor.get_service_bindings():
                if binding.name is not None:
                    if binding.name in seen:
                        continue
                    seen.add(binding.name)
                bindings.append(binding)
        return bindings


def build_default_accessor(settings: Settings) -> ServiceBindingAccessor:
    """Build the accessor used when ``create_app`` is given none."""
    return CompositeServiceBindingAccessor(
        [
            VcapServicesAccessor(settings.vcap_services),
            BindingRootAccessor(settings.service_binding_root),
        ]
    )
