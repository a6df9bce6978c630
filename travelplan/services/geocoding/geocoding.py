"""Place-name geocoding with an ordered chain of providers."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional, Sequence

import httpx

from travelplan.core.config import ApiSettings
from travelplan.core.schemas import Coordinates

logger = logging.getLogger(__name__)


class GoogleGeocoder:
    """Google Geocoding API; needs ``GOOGLE_MAPS_API_KEY``."""

    name = "google"
    url = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(self, api_key: Optional[str]) -> None:
        self.api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def geocode(self, client: httpx.AsyncClient, place: str) -> Optional[Coordinates]:
        response = await client.get(self.url, params={"address": place, "key": self.api_key})
        response.raise_for_status()
        results = response.json().get("results") or []
        if not results:
            return None
        location = results[0]["geometry"]["location"]
        return Coordinates(lat=location["lat"], lng=location["lng"])


class GeoapifyGeocoder:
    """Geoapify forward geocoding; needs ``GEOAPIFY_API_KEY``."""

    name = "geoapify"
    url = "https://api.geoapify.com/v1/geocode/search"

    def __init__(self, api_key: Optional[str]) -> None:
        self.api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def geocode(self, client: httpx.AsyncClient, place: str) -> Optional[Coordinates]:
        response = await client.get(self.url, params={"text": place, "apiKey": self.api_key})
        response.raise_for_status()
        features = response.json().get("features") or []
        if not features:
            return None
        lon, lat = features[0]["geometry"]["coordinates"][:2]
        return Coordinates(lat=lat, lng=lon)


class NominatimGeocoder:
    """Public OpenStreetMap Nominatim service; keyless, opt-in last resort."""

    name = "nominatim"
    url = "https://nominatim.openstreetmap.org/search"
    enabled = True

    def __init__(self, *, user_agent: str = "TravelPlanAPI/1.0") -> None:
        self.user_agent = user_agent

    async def geocode(self, client: httpx.AsyncClient, place: str) -> Optional[Coordinates]:
        response = await client.get(
            self.url,
            params={"q": place, "format": "json", "limit": 1},
            headers={"User-Agent": self.user_agent},
        )
        response.raise_for_status()
        data = response.json()
        if not data:
            return None
        first = data[0]
        return Coordinates(lat=float(first["lat"]), lng=float(first["lon"]))


class GeoResolver:
    """Tries each provider in order and returns the first coordinates found.

    Provider failures are logged and swallowed; ``resolve`` never raises.
    """

    def __init__(
        self,
        providers: Sequence[Any],
        *,
        timeout_s: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.providers: List[Any] = list(providers)
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_s, connect=10.0))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def resolve(self, place: str) -> Optional[Coordinates]:
        """Return coordinates for ``place`` or ``None`` when every provider fails."""

        if not place:
            return None

        for provider in self.providers:
            if not provider.enabled:
                logger.debug("Skipping %s geocoder for %r: no API key", provider.name, place)
                continue
            try:
                coordinates = await provider.geocode(self._client, place)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.warning(
                    "%s geocoding failed for %r, trying next provider: %s",
                    provider.name,
                    place,
                    _describe(exc),
                )
                continue
            if coordinates is not None:
                logger.info("Resolved %r via %s", place, provider.name)
                return coordinates
            logger.info("%s geocoding returned no results for %r", provider.name, place)

        logger.warning("Could not resolve coordinates for %r", place)
        return None


def _describe(exc: Exception) -> str:
    # Provider URLs carry API keys in their query strings; never log them.
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    return type(exc).__name__


def create_geo_resolver(settings: ApiSettings) -> GeoResolver:
    """Build the resolver chain: Google, then Geoapify, then (opt-in) Nominatim."""

    providers: List[Any] = [
        GoogleGeocoder(settings.google_maps_api_key),
        GeoapifyGeocoder(settings.geoapify_api_key),
    ]
    if settings.enable_nominatim_fallback:
        providers.append(NominatimGeocoder())
    return GeoResolver(providers, timeout_s=settings.request_timeout_s)
