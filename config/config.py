import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "campus-attendance-dev"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "campus_attendance")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_JSON = bool(int(os.environ.get("LOG_JSON", "0")))

    # Check-in window policy (minutes)
    PRE_CHECKIN_MINUTES = int(os.environ.get("PRE_CHECKIN_MINUTES", "10"))
    GRACE_MINUTES = int(os.environ.get("GRACE_MINUTES", "10"))
    DEFAULT_MAKEUP_MINUTES = int(os.environ.get("DEFAULT_MAKEUP_MINUTES", "2"))

    # Used when system_configs has term.start_date but no term.max_teaching_weeks
    DEFAULT_MAX_TEACHING_WEEKS = int(os.environ.get("DEFAULT_MAX_TEACHING_WEEKS", "18"))

    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))


SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

DEBUG = bool(int(os.environ.get("DEBUG", "1")))

LOG_LEVEL = Config.LOG_LEVEL
LOG_JSON = Config.LOG_JSON
PRE_CHECKIN_MINUTES = Config.PRE_CHECKIN_MINUTES
GRACE_MINUTES = Config.GRACE_MINUTES
DEFAULT_MAKEUP_MINUTES = Config.DEFAULT_MAKEUP_MINUTES
DEFAULT_MAX_TEACHING_WEEKS = Config.DEFAULT_MAX_TEACHING_WEEKS
AUTO_INIT_DB = Config.AUTO_INIT_DB
