"""External service integrations for travel plan generation.

- Gemini: text generation with a shared cooldown
- Geocoding: place name to coordinates with provider fallback
- Maps: static map URLs and the interactive embed

Each service module exports a ``create_*`` factory taking ``ApiSettings``.

Example Usage:
    >>> from travelplan.core.config import ApiSettings
    >>> from travelplan.services import create_geo_resolver
    >>>
    >>> resolver = create_geo_resolver(ApiSettings.from_env())
    >>> coords = await resolver.resolve("Goa")
"""

from travelplan.services.gemini import (
    Cooldown,
    GeminiClient,
    create_gemini_client,
    get_shared_cooldown,
    parse_combined_response,
)
from travelplan.services.geocoding import GeoResolver, create_geo_resolver
from travelplan.services.maps import MapComposer, create_map_composer

__all__ = [
    # Gemini
    "Cooldown",
    "GeminiClient",
    "create_gemini_client",
    "get_shared_cooldown",
    "parse_combined_response",
    # Geocoding
    "GeoResolver",
    "create_geo_resolver",
    # Maps
    "MapComposer",
    "create_map_composer",
]
