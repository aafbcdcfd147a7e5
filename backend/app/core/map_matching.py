"""Async client for the Mapbox Map Matching API (v5)."""

import asyncio
import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from app.config import settings
from app.core.errors import CoordinateRangeError, InputSizeError
from app.core.geometry import Coordinate
from app.core.waypoints import encode_waypoints, validate_coordinates

logger = logging.getLogger(__name__)

# API limits on the number of trace points per request
MIN_POINTS = 2
MAX_POINTS = 100

MAX_RETRIES = 2
RETRY_BACKOFF = [1, 3]  # seconds between retries


class Profile(str, enum.Enum):
    DRIVING = "driving"
    WALKING = "walking"
    CYCLING = "cycling"
    DRIVING_TRAFFIC = "driving-traffic"


class MapMatchingError(Exception):
    """The map-matching request failed (transport error or API error)."""


class NoMatchError(MapMatchingError):
    """The API answered but could not snap the trace to the road network."""


@dataclass
class MatchedRoute:
    coordinates: list[Coordinate]  # [(lon, lat), ...]
    distance: float  # meters
    duration: float  # seconds
    confidence: float  # 0.0–1.0


class MapMatchingClient:
    """Snaps drawn routes onto the road network."""

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int = MAX_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._access_token = access_token if access_token is not None else settings.mapbox_access_token
        self._max_retries = max_retries
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.mapbox_base_url,
            timeout=timeout or settings.map_matching_timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _get_with_retry(self, path: str, params: dict) -> httpx.Response:
        """GET with retry on timeouts and 5xx. Raises MapMatchingError when it gives up."""
        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._client.get(path, params=params)
                resp.raise_for_status()
                return resp
            except (httpx.ReadTimeout, httpx.ConnectTimeout, httpx.ConnectError) as e:
                if attempt < self._max_retries:
                    wait = RETRY_BACKOFF[min(attempt, len(RETRY_BACKOFF) - 1)]
                    logger.warning(
                        "Map matching attempt %d/%d failed (%s), retrying in %ds",
                        attempt + 1, self._max_retries + 1, type(e).__name__, wait,
                    )
                    await asyncio.sleep(wait)
                else:
                    raise MapMatchingError(
                        f"Map Matching API unreachable after {attempt + 1} attempts: {type(e).__name__}"
                    ) from e
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status >= 500 and attempt < self._max_retries:
                    wait = RETRY_BACKOFF[min(attempt, len(RETRY_BACKOFF) - 1)]
                    logger.warning(
                        "Map matching attempt %d/%d got HTTP %d, retrying in %ds",
                        attempt + 1, self._max_retries + 1, status, wait,
                    )
                    await asyncio.sleep(wait)
                    continue
                self._raise_api_error(e.response)
            except httpx.HTTPError as e:
                raise MapMatchingError(f"Map Matching API request failed: {e}") from e
        raise MapMatchingError("Map Matching API request failed")

    @staticmethod
    def _raise_api_error(resp: httpx.Response) -> None:
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or resp.reason_phrase
        if body.get("code") == "NoMatch":
            raise NoMatchError(f"No match: {message}")
        raise MapMatchingError(f"Map Matching API error: {resp.status_code} - {message}")

    async def match(
        self,
        coordinates: Sequence[Coordinate],
        profile: Profile = Profile.DRIVING,
    ) -> MatchedRoute:
        """Snap ``[(lon, lat), ...]`` to roads for the given travel profile."""
        if len(coordinates) < MIN_POINTS:
            raise InputSizeError(
                f"Map matching needs at least {MIN_POINTS} coordinates, got {len(coordinates)}"
            )
        if len(coordinates) > MAX_POINTS:
            raise InputSizeError(
                f"Map matching accepts at most {MAX_POINTS} coordinates, got {len(coordinates)}; "
                "split the route into smaller segments"
            )
        if not validate_coordinates(coordinates):
            raise CoordinateRangeError("Route contains coordinates out of range")

        profile = Profile(profile)
        path = f"/matching/v5/mapbox/{profile.value}/{encode_waypoints(coordinates)}"
        params = {
            "geometries": "geojson",
            "overview": "full",
            "steps": "false",
            "tidy": "false",
            "access_token": self._access_token,
        }
        resp = await self._get_with_retry(path, params)

        try:
            data = resp.json()
        except ValueError as e:
            raise MapMatchingError("Map Matching API returned invalid JSON") from e

        if not isinstance(data, dict) or data.get("code") != "Ok" or not data.get("matchings"):
            raise NoMatchError("Could not match route to roads")

        # The first matching is the best one
        matching = data["matchings"][0]
        try:
            route = MatchedRoute(
                coordinates=[(float(c[0]), float(c[1])) for c in matching["geometry"]["coordinates"]],
                distance=float(matching["distance"]),
                duration=float(matching["duration"]),
                confidence=float(matching.get("confidence", 0.0)),
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise MapMatchingError(f"Malformed matching in API response: {e}") from e

        logger.info(
            "Matched %d points to %d (%s, %.0fm, confidence %.2f)",
            len(coordinates), len(route.coordinates), profile.value,
            route.distance, route.confidence,
        )
        return route
