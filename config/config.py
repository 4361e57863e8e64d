"""Settings shared by every environment. Values come from the environment (.env)."""

import os
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]


def env_bool(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

UPLOAD_DIR = os.getenv("UPLOAD_DIR", str(REPO_ROOT / "uploads"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(16 * 1024 * 1024)))

# Business day: 04:00 Asia/Jakarta cutover
BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "Asia/Jakarta")
DAY_CUTOVER_HOUR = int(os.getenv("DAY_CUTOVER_HOUR", "4"))
MAX_SESSIONS_PER_DAY = int(os.getenv("MAX_SESSIONS_PER_DAY", "5"))

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
