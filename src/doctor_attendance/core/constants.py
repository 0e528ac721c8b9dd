"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000

DEFAULT_AUTHORIZED_LAT = -6.2
DEFAULT_AUTHORIZED_LNG = 106.816666
DEFAULT_GEOFENCE_RADIUS = 500

DEFAULT_TIMEZONE = "UTC"

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
RECENT_ACTIVITY_LIMIT = 20

MIN_PASSWORD_LENGTH = 6
MAX_USER_ID_LENGTH = 20
MAX_NAME_LENGTH = 100

DEFAULT_MAX_PHOTO_BYTES = 5 * 1024 * 1024
PHOTO_SUBDIR = "attendance"
