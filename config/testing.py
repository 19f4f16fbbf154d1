import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_portal_test"),
    "connection_timeout": 2,
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

LOG_LEVEL = "WARNING"
LOG_JSON = False
LOG_FILE = ""

SCHEDULER_ENABLED = False
SCHEDULER_TIMEZONE = "Asia/Kolkata"

BATCH_MAX_WORKERS = 2
BATCH_STUDENT_TIMEOUT_SECONDS = 5.0
