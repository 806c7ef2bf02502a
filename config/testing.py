import os

from config.config import *  # noqa: F401,F403
from config.config import DB_CONFIG as _BASE_DB_CONFIG

SECRET_KEY = "test-secret"

# Never point the test settings at the working database.
DB_CONFIG = {**_BASE_DB_CONFIG, "database": os.getenv("TEST_DB_NAME", "campus_attendance_test")}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
