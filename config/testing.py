SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

STORAGE_BACKEND = "memory"
DATA_FILE = ""

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "club_points_test",
}

AUTO_INIT_DB = False

ADMIN_CREDENTIALS = "admin:password,GI11120:CSS12340"
