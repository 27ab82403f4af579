from __future__ import annotations

from .distance import distance_meters
from .model import GeofenceConfig, LocationSample


def is_within_geofence(sample: LocationSample, fence: GeofenceConfig) -> bool:
    """True when the fix is inside the radius AND precise enough.

    A low-precision fix fails even when its center lies inside the zone.
    """
    distance = distance_meters(sample.coordinate, fence.center)
    return distance <= fence.radius_meters and sample.accuracy_meters <= fence.tolerance_meters
