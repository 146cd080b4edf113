"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_KM = 6371.0
DEFAULT_ATTENDANCE_RADIUS_METERS = 20.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 20.0
DEFAULT_LOCATION_TIMEOUT_SECONDS = 15.0
DEFAULT_APP_VERSION = "3.0.0"
PASS_YEAR_PIVOT = 30
