from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_timestamp
from ..common.validators import require_in_range, require_number
from ..core.exceptions import InvalidLocationError, ValidationError


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    @classmethod
    def checked(cls, latitude: Any, longitude: Any) -> "Coordinate":
        """Build a coordinate, rejecting non-numeric or out-of-range values."""
        try:
            lat = require_in_range(require_number(latitude, "latitude"), "latitude", -90, 90)
            lon = require_in_range(require_number(longitude, "longitude"), "longitude", -180, 180)
        except ValidationError as e:
            raise InvalidLocationError(str(e)) from e
        return cls(latitude=lat, longitude=lon)

    def as_text(self) -> str:
        """Fallback address when the client sends none."""
        return f"{self.latitude:.6f}, {self.longitude:.6f}"


@dataclass(frozen=True)
class LocationSample:
    """A client geolocation fix as received at check-in/out."""

    coordinate: Coordinate
    accuracy_meters: float
    captured_at: datetime
    address: Optional[str] = None
    altitude: Optional[float] = None
    heading: Optional[float] = None
    speed: Optional[float] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], *, received_at: datetime) -> "LocationSample":
        """Parse the ``location`` object of a check-in/out request body.

        ``received_at`` stands in for a missing ``timestamp``.
        """
        if not isinstance(payload, Mapping):
            raise InvalidLocationError("Location must be an object")

        coordinate = Coordinate.checked(payload.get("latitude"), payload.get("longitude"))

        try:
            accuracy = require_number(payload.get("accuracy"), "accuracy")
        except ValidationError as e:
            raise InvalidLocationError(str(e)) from e
        if accuracy < 0:
            raise InvalidLocationError("accuracy must not be negative")

        raw_ts = payload.get("timestamp")
        try:
            captured_at = parse_timestamp(raw_ts) if raw_ts else received_at
        except ValueError as e:
            raise InvalidLocationError(f"Invalid location timestamp: {raw_ts!r}") from e

        address = payload.get("address")
        address = str(address).strip() if address else None

        return cls(
            coordinate=coordinate,
            accuracy_meters=accuracy,
            captured_at=captured_at,
            address=address or None,
            altitude=_optional_float(payload.get("altitude")),
            heading=_optional_float(payload.get("heading")),
            speed=_optional_float(payload.get("speed")),
        )

    @property
    def display_address(self) -> str:
        return self.address or self.coordinate.as_text()


@dataclass(frozen=True)
class GeofenceConfig:
    """Circular office zone.

    ``enabled`` switches geofencing off entirely; ``blocks_check_in`` turns an
    outside fix from a flagged status into a rejected check-in.
    """

    center: Coordinate
    radius_meters: float
    tolerance_meters: float
    address: Optional[str] = None
    enabled: bool = True
    blocks_check_in: bool = False


def _optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
