SECRET_KEY = "test-secret"

API_BASE_URL = "http://127.0.0.1:9/api"
REQUEST_TIMEOUT_SECONDS = 2.0
LOCATION_TIMEOUT_SECONDS = 1.0

ATTENDANCE_RADIUS_METERS = 20.0
SUNDAY_BLOCKED = True
ATTENDANCE_WINDOW = None

APP_VERSION = "3.0.0"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
