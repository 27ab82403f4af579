"""Example: evaluate a check-in with the status engine only (no Flask, no database).

The calculator takes the effective settings explicitly, so the same call is
what the service runs for every request.
"""

from datetime import datetime

from src.geo_attendance.geo_attendance.attendance.calculator import derive_check_in_status, derive_final_status
from src.geo_attendance.geo_attendance.geo.model import LocationSample
from src.geo_attendance.geo_attendance.settings.service import parse_geofence, parse_shift_window


def main():
    fence = parse_geofence({"latitude": -6.2088, "longitude": 106.8456, "radius": 100, "tolerance": 10}, None)
    window = parse_shift_window({"standard_check_in": "09:00"})

    check_in = datetime(2026, 3, 2, 9, 20)
    sample = LocationSample.from_payload(
        {"latitude": -6.2089, "longitude": 106.8457, "accuracy": 5},
        received_at=check_in,
    )
    print(derive_check_in_status(check_in, sample, window, fence))
    print(derive_final_status(check_in, datetime(2026, 3, 2, 18, 0), window))


if __name__ == "__main__":
    main()
