import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "smartkyzmet_test"),
}

TIMEZONE = "Asia/Almaty"

ANALYTICS_SERVICE_URL = "http://analytics.invalid"
ANALYTICS_TIMEOUT = 1.0

SESSION_BACKEND = "memory"
SESSION_LIFETIME_SECONDS = 3600

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "/tmp/smartkyzmet-uploads")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
