import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_portal"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "1")))
LOG_FILE = os.getenv("LOG_FILE", "logs/attendance_portal.log")

SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "1")))
SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "Asia/Kolkata")
DAILY_JOB_HOUR = int(os.getenv("DAILY_JOB_HOUR", "0"))
DAILY_JOB_MINUTE = int(os.getenv("DAILY_JOB_MINUTE", "0"))
WEEKLY_JOB_DAY = os.getenv("WEEKLY_JOB_DAY", "sun")
WEEKLY_JOB_HOUR = int(os.getenv("WEEKLY_JOB_HOUR", "1"))
WEEKLY_JOB_MINUTE = int(os.getenv("WEEKLY_JOB_MINUTE", "0"))

BATCH_MAX_WORKERS = int(os.getenv("BATCH_MAX_WORKERS", "8"))
BATCH_STUDENT_TIMEOUT_SECONDS = float(os.getenv("BATCH_STUDENT_TIMEOUT_SECONDS", "60"))
