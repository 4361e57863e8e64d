import os

from config.config import *  # noqa: F401,F403
from config.config import env_bool

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")
# Optional: also create the admin account on startup
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", "1")
