"""Static vendor autostart target catalog."""

from __future__ import annotations

from autostart_resolver.catalog.targets import (
    BUILTIN_CATALOG,
    BUILTIN_TARGETS,
    CatalogError,
    TargetCatalog,
    TargetDescriptor,
    lookup,
    normalize_vendor_key,
)

__all__ = [
    "BUILTIN_CATALOG",
    "BUILTIN_TARGETS",
    "CatalogError",
    "TargetCatalog",
    "TargetDescriptor",
    "lookup",
    "normalize_vendor_key",
]
