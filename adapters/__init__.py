"""
Municipality Adapters.

Each adapter provides access to one municipality's meeting data behind the
``MunicipalityAdapter`` interface, whatever portal technology the
municipality uses. The tool surface looks adapters up by key in
``ADAPTERS``.

Available Municipalities:
─────────────────────────────────────────────────────────────────────────────
    teaneck      Teaneck Township, NJ (IQM2 portal, or recorded data)

Configuration:
─────────────────────────────────────────────────────────────────────────────
    TEANECK_ADAPTER_MODE    live (default) or stub

New municipalities register a factory at runtime:

    register_adapter("hackensack", create_hackensack_adapter)
"""

from typing import Callable, Dict

from adapters.base import MunicipalityAdapter
from adapters.iqm2 import IQM2Adapter
from adapters.teaneck import TeaneckAdapter, create_teaneck_adapter

AdapterFactory = Callable[[], MunicipalityAdapter]

# Registry of available adapters
ADAPTERS: Dict[str, AdapterFactory] = {
    "teaneck": create_teaneck_adapter,
}


def register_adapter(name: str, factory: AdapterFactory) -> None:
    """Register (or replace) the adapter factory for a municipality."""
    ADAPTERS[name.strip().lower()] = factory


def available_municipalities() -> list[str]:
    """Registered municipality keys, sorted."""
    return sorted(ADAPTERS)


__all__ = [
    "ADAPTERS",
    "AdapterFactory",
    "IQM2Adapter",
    "MunicipalityAdapter",
    "TeaneckAdapter",
    "available_municipalities",
    "create_teaneck_adapter",
    "register_adapter",
]
