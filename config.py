"""
config.py
---------
Centralized settings for the campus trash tracker. Values come from the
environment (a local .env file is loaded first) with sensible defaults.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# MongoDB settings
MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/")
MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME", "campus_cleanup")
MONGO_TIMEOUT_MS = int(os.environ.get("MONGO_TIMEOUT_MS", "5000"))

# Sessions
SECRET_KEY = os.environ.get("SECRET_KEY") or os.urandom(24)

# Strict mode enables the 2024 lower date bound and the school email pattern
STRICT_MODE = _env_flag("STRICT_MODE", True)
INSTITUTION_EMAIL_DOMAIN = os.environ.get("INSTITUTION_EMAIL_DOMAIN", "gordoncollege.edu.ph")

# Leaderboard
LEADERBOARD_API_LIMIT = int(os.environ.get("LEADERBOARD_API_LIMIT", "10"))

# Server
PORT = int(os.environ.get("PORT", "3000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
