import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# memory | json | mysql
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "json")
DATA_FILE = os.getenv("DATA_FILE", "data/club_points.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "club_points"),
}

# If enabled (mysql backend), the app applies schema.sql on startup (CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# "cni:password,cni2:password2"
ADMIN_CREDENTIALS = os.getenv("ADMIN_CREDENTIALS", "admin:password")
