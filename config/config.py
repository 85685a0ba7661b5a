"""Values shared by every environment, read from the process environment."""
import os


def env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": env_int("DB_PORT", 3306),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_payroll"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# IANA zone; aware client timestamps are converted into it
TIMEZONE = os.getenv("TIMEZONE") or None

AUTO_CHECKOUT_INTERVAL_SECONDS = env_int("AUTO_CHECKOUT_INTERVAL_SECONDS", 60)
ABSENT_SWEEP_HOUR = env_int("ABSENT_SWEEP_HOUR", 23)
ABSENT_SWEEP_MINUTE = env_int("ABSENT_SWEEP_MINUTE", 55)
PAYROLL_HOUR = env_int("PAYROLL_HOUR", 23)
PAYROLL_MINUTE = env_int("PAYROLL_MINUTE", 58)
ASSIGNMENT_PURGE_HOUR = env_int("ASSIGNMENT_PURGE_HOUR", 0)
ASSIGNMENT_PURGE_MINUTE = env_int("ASSIGNMENT_PURGE_MINUTE", 5)

GEOCODER_URL = os.getenv("GEOCODER_URL", "https://nominatim.openstreetmap.org/reverse")
GEOCODER_TIMEOUT_SECONDS = float(os.getenv("GEOCODER_TIMEOUT_SECONDS", "5"))
GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "attendance-payroll/1.0")

FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "0.3"))
FACE_CACHE_TTL_SECONDS = env_int("FACE_CACHE_TTL_SECONDS", 3600)

# First admin account, created on startup when none exists
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")
