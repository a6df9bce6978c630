"""Static map image URLs and the embeddable interactive map."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional, Sequence

import httpx

from travelplan.core.config import ApiSettings
from travelplan.core.schemas import Coordinates, MapBundle

logger = logging.getLogger(__name__)

MAP_ZOOM = 12
MAP_WIDTH = 600
MAP_HEIGHT = 400


class GoogleStaticMap:
    """Google Static Maps; the URL is checked with a HEAD request before use."""

    name = "google"
    verify = True

    def __init__(self, api_key: Optional[str]) -> None:
        self.api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def build_url(self, coords: Coordinates) -> str:
        return (
            "https://maps.googleapis.com/maps/api/staticmap"
            f"?center={coords.lat},{coords.lng}&zoom={MAP_ZOOM}&size={MAP_WIDTH}x{MAP_HEIGHT}"
            f"&markers=color:red%7C{coords.lat},{coords.lng}&key={self.api_key}"
        )


class GeoapifyStaticMap:
    """Geoapify static maps; trusted without a reachability check."""

    name = "geoapify"
    verify = False

    def __init__(self, api_key: Optional[str]) -> None:
        self.api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def build_url(self, coords: Coordinates) -> str:
        return (
            "https://maps.geoapify.com/v1/staticmap"
            f"?style=osm-bright&width={MAP_WIDTH}&height={MAP_HEIGHT}"
            f"&center=lonlat:{coords.lng},{coords.lat}&zoom={MAP_ZOOM}"
            f"&marker=lonlat:{coords.lng},{coords.lat};type:material;color:%23ff0000;size:large"
            f"&apiKey={self.api_key}"
        )


INTERACTIVE_MAP_TEMPLATE = """
<div style="width: 100%; height: 400px; border: 1px solid #ddd; border-radius: 8px; overflow: hidden;">
  <iframe
    width="100%"
    height="400"
    src="https://maps.google.com/maps?q={lat},{lng}&hl=en&z={zoom}&output=embed"
    style="border: none;">
  </iframe>
</div>
""".strip()


class MapComposer:
    """Builds the destination's static map URL and interactive embed."""

    def __init__(
        self,
        static_providers: Sequence[Any],
        *,
        timeout_s: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.static_providers: List[Any] = list(static_providers)
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_s, connect=10.0))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _reachable(self, url: str, provider_name: str) -> bool:
        try:
            response = await self._client.head(url)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("%s static map check failed: %s", provider_name, type(exc).__name__)
            return False
        if not response.is_success:
            logger.warning("%s static map check returned HTTP %s", provider_name, response.status_code)
            return False
        return True

    async def compose_static(self, coords: Coordinates) -> Optional[str]:
        """Return the first usable static map URL, or ``None``."""

        for provider in self.static_providers:
            if not provider.enabled:
                logger.debug("Skipping %s static map: no API key", provider.name)
                continue
            url = provider.build_url(coords)
            if provider.verify and not await self._reachable(url, provider.name):
                continue
            return url
        logger.warning("No static map provider available for %s,%s", coords.lat, coords.lng)
        return None

    def compose_interactive(self, coords: Coordinates) -> str:
        return INTERACTIVE_MAP_TEMPLATE.format(lat=coords.lat, lng=coords.lng, zoom=MAP_ZOOM)

    async def compose(
        self,
        destination: Optional[Coordinates],
        origin: Optional[Coordinates] = None,
    ) -> MapBundle:
        """Static map from the destination alone; the embed needs both endpoints."""

        if destination is None:
            return MapBundle()
        static_url = await self.compose_static(destination)
        interactive = self.compose_interactive(destination) if origin is not None else None
        return MapBundle(static_map_url=static_url, interactive_map=interactive)


def create_map_composer(settings: ApiSettings) -> MapComposer:
    """Google first, Geoapify as the fallback."""

    return MapComposer(
        [GoogleStaticMap(settings.google_maps_api_key), GeoapifyStaticMap(settings.geoapify_api_key)],
        timeout_s=settings.request_timeout_s,
    )
