"""Map imagery for generated plans.

Public API:
    - MapComposer: static map URL with provider fallback plus the iframe embed
    - create_map_composer: factory building the default provider chain
"""
from travelplan.services.maps.static_map import (
    GeoapifyStaticMap,
    GoogleStaticMap,
    MapComposer,
    create_map_composer,
)

__all__ = [
    "MapComposer",
    "GoogleStaticMap",
    "GeoapifyStaticMap",
    "create_map_composer",
]
