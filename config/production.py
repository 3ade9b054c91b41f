import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")
DATA_FILE = os.getenv("DATA_FILE", "data/club_points.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "club_points"),
}

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

# No default admin in production: set ADMIN_CREDENTIALS explicitly.
ADMIN_CREDENTIALS = os.getenv("ADMIN_CREDENTIALS", "")
