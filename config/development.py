import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

API_BASE_URL = os.getenv("API_BASE_URL", "https://api.tqfmohallatuitioncenters.in/api")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "20"))
LOCATION_TIMEOUT_SECONDS = float(os.getenv("LOCATION_TIMEOUT_SECONDS", "15"))

# Geofence policy
ATTENDANCE_RADIUS_METERS = float(os.getenv("ATTENDANCE_RADIUS_METERS", "20"))
SUNDAY_BLOCKED = bool(int(os.getenv("SUNDAY_BLOCKED", "1")))
# Optional local window, e.g. "16:00-18:00". The backend stays the final authority.
ATTENDANCE_WINDOW = os.getenv("ATTENDANCE_WINDOW") or None

APP_VERSION = os.getenv("APP_VERSION", "3.0.0")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
