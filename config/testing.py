import os
import tempfile

from config.config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "attendance-tracker-uploads"))

AUTO_INIT_DB = False
AUTO_SEED_DB = False
