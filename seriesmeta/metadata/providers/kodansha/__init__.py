"""
Kodansha USA metadata provider.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from seriesmeta.metadata.providers.kodansha.client import KodanshaClient
    from seriesmeta.metadata.providers.kodansha.mapper import KodanshaMetadataMapper
    from seriesmeta.metadata.providers.kodansha.provider import KodanshaMetadataProvider

_EXPORTS = {
    "KodanshaClient": "client",
    "KodanshaMetadataMapper": "mapper",
    "KodanshaMetadataProvider": "provider",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str):
    if name in _EXPORTS:
        from importlib import import_module

        module = import_module(f"seriesmeta.metadata.providers.kodansha.{_EXPORTS[name]}")
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
