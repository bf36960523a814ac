"""
Nautiljon metadata provider.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from seriesmeta.metadata.providers.nautiljon.client import NautiljonClient
    from seriesmeta.metadata.providers.nautiljon.mapper import NautiljonMetadataMapper
    from seriesmeta.metadata.providers.nautiljon.provider import NautiljonMetadataProvider

_EXPORTS = {
    "NautiljonClient": "client",
    "NautiljonMetadataMapper": "mapper",
    "NautiljonMetadataProvider": "provider",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str):
    if name in _EXPORTS:
        from importlib import import_module

        module = import_module(f"seriesmeta.metadata.providers.nautiljon.{_EXPORTS[name]}")
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
