import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_portal"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "0")))
LOG_FILE = os.getenv("LOG_FILE", "")

SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "1")))
SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "Asia/Kolkata")
DAILY_JOB_HOUR = int(os.getenv("DAILY_JOB_HOUR", "0"))
DAILY_JOB_MINUTE = int(os.getenv("DAILY_JOB_MINUTE", "0"))
WEEKLY_JOB_DAY = os.getenv("WEEKLY_JOB_DAY", "sun")
WEEKLY_JOB_HOUR = int(os.getenv("WEEKLY_JOB_HOUR", "1"))
WEEKLY_JOB_MINUTE = int(os.getenv("WEEKLY_JOB_MINUTE", "0"))

BATCH_MAX_WORKERS = int(os.getenv("BATCH_MAX_WORKERS", "2"))
BATCH_STUDENT_TIMEOUT_SECONDS = float(os.getenv("BATCH_STUDENT_TIMEOUT_SECONDS", "60"))
