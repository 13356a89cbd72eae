"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CLASS_TIME_TBD = "TBD"

CATALOG_CACHE_KEY = "catalog.years"
DEFAULT_CACHE_TTL_HOURS = 24

DEVICE_ID_KEY = "deviceUniqueId"

DEFAULT_GEOFENCE_RADIUS_METERS = 80.0
DEFAULT_LOCAL_TIMEZONE = "Asia/Kolkata"

MIN_PASSWORD_LENGTH = 6

NOTE_EXTENSIONS = frozenset({"pdf", "doc", "docx", "ppt", "pptx", "xls", "xlsx", "txt", "jpg", "jpeg", "png", "gif"})
