"""Geocoding and location resolution services.

Converts a place name to coordinates through an ordered chain of providers
(Google Geocoding, Geoapify, optionally OpenStreetMap Nominatim).

Public API:
    - GeoResolver: tries providers in order, never raises
    - create_geo_resolver: factory building the default chain from settings
"""
from travelplan.services.geocoding.geocoding import (
    GeoapifyGeocoder,
    GeoResolver,
    GoogleGeocoder,
    NominatimGeocoder,
    create_geo_resolver,
)

__all__ = [
    "GeoResolver",
    "GoogleGeocoder",
    "GeoapifyGeocoder",
    "NominatimGeocoder",
    "create_geo_resolver",
]
