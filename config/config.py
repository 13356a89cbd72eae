import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "campus-attendance-secret"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "campus_attendance_db")
    DB_CONNECT_TIMEOUT = int(os.environ.get("DB_CONNECT_TIMEOUT", "10"))

    AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
    AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")

    LOCAL_TIMEZONE = os.environ.get("LOCAL_TIMEZONE", "Asia/Kolkata")
    GEOFENCE_RADIUS_METERS = float(os.environ.get("GEOFENCE_RADIUS_METERS", "80"))
    CATALOG_CACHE_TTL_HOURS = float(os.environ.get("CATALOG_CACHE_TTL_HOURS", "24"))

    LOCAL_STORE_PATH = os.environ.get("LOCAL_STORE_PATH", "var/local_store.json")
    DEVICE_FALLBACK_PATH = os.environ.get("DEVICE_FALLBACK_PATH", "var/device_fallback.json")
    NOTES_STORAGE_ROOT = os.environ.get("NOTES_STORAGE_ROOT", "var/notes")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


# Module-level names read by create_app
SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
    "connection_timeout": Config.DB_CONNECT_TIMEOUT,
}

DEBUG = _flag("DEBUG", "1")

AUTO_INIT_DB = Config.AUTO_INIT_DB
AUTO_SEED_DB = Config.AUTO_SEED_DB
LOCAL_TIMEZONE = Config.LOCAL_TIMEZONE
GEOFENCE_RADIUS_METERS = Config.GEOFENCE_RADIUS_METERS
CATALOG_CACHE_TTL_HOURS = Config.CATALOG_CACHE_TTL_HOURS
LOCAL_STORE_PATH = Config.LOCAL_STORE_PATH
DEVICE_FALLBACK_PATH = Config.DEVICE_FALLBACK_PATH
NOTES_STORAGE_ROOT = Config.NOTES_STORAGE_ROOT
LOG_LEVEL = Config.LOG_LEVEL
