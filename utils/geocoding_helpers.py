"""
Geocoding helper utilities for resolving destination and journal-entry
place names to coordinates using Nominatim.
"""
import httpx
from typing import List, Optional, Tuple

import config
from utils.logger import setup_api_logger

logger = setup_api_logger()

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"


async def geocode_place_to_coords(
    place_query: str,
    timeout: float = 10.0
) -> Optional[Tuple[float, float, str]]:
    """
    Convert a place name/address to coordinates using Nominatim.

    Returns:
        (lat, lon, display_name) or None if geocoding fails
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.get(
                NOMINATIM_SEARCH_URL,
                params={
                    "q": place_query,
                    "format": "json",
                    "limit": 1,
                },
                headers={"User-Agent": "JourneyStack/1.0"}
            )
            resp.raise_for_status()
            data = resp.json()

            if data:
                result = data[0]
                return (float(result["lat"]), float(result["lon"]), result["display_name"])
    except (httpx.HTTPError, KeyError, ValueError) as exc:
        logger.warning("Geocoding failed for %r: %s", place_query, exc)

    return None


def needs_coordinates(place: Optional[dict]) -> bool:
    return bool(place and place.get("name")) and (place.get("lat") is None or place.get("lng") is None)


async def fill_coordinates(place: Optional[dict]) -> Optional[dict]:
    """Return `place` with lat/lng filled in from its name when missing."""
    if not config.GEOCODING_ENABLED or not needs_coordinates(place):
        return place

    result = await geocode_place_to_coords(place["name"])
    if result:
        lat, lon, _ = result
        return {**place, "lat": lat, "lng": lon}
    return place


async def fill_destinations(destinations: List[dict]) -> List[dict]:
    return [await fill_coordinates(d) for d in destinations]
