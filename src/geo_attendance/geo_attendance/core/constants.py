"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
These are the fallbacks used when the settings table has no stored value.
"""

EARTH_RADIUS_METERS = 6_371_000

# office_location
DEFAULT_OFFICE_LATITUDE = -6.2088
DEFAULT_OFFICE_LONGITUDE = 106.8456
DEFAULT_OFFICE_ADDRESS = "Jakarta, Indonesia"
DEFAULT_GEOFENCE_RADIUS_METERS = 100.0
DEFAULT_GEOFENCE_TOLERANCE_METERS = 10.0

# work_schedule
DEFAULT_CHECK_IN_START = "06:00"
DEFAULT_CHECK_IN_END = "10:00"
DEFAULT_CHECK_OUT_START = "14:00"
DEFAULT_CHECK_OUT_END = "22:00"
DEFAULT_STANDARD_CHECK_IN = "08:00"
DEFAULT_MIN_WORK_HOURS = 4.0
DEFAULT_MAX_WORK_HOURS = 12.0
DEFAULT_STANDARD_WORK_HOURS = 8.0
DEFAULT_LATE_TOLERANCE_MINUTES = 15

DEFAULT_HISTORY_LIMIT = 30

SETTING_OFFICE_LOCATION = "office_location"
SETTING_WORK_SCHEDULE = "work_schedule"
SETTING_GEOFENCING = "geofencing"
SETTING_KEYS = (SETTING_OFFICE_LOCATION, SETTING_WORK_SCHEDULE, SETTING_GEOFENCING)
