# people_tracker/config.py
import os
from typing import List

# --- DATABASE CONFIGURATION ---
MONGO_URI: str = os.environ.get("PEOPLE_TRACKER_MONGO_URI", "mongodb://localhost:27017/")
#MONGO_URI: str = "mongodb://db:27017/" # for docker containers
MONGO_DB_NAME: str = os.environ.get("PEOPLE_TRACKER_MONGO_DB", "PeopleTracker")

PEOPLE_COLLECTION: str = "people"
RELATIONSHIPS_COLLECTION: str = "relationships"


# --- OWNERSHIP ---
# Header carrying the owning user's id. Requests without it fall back to the
# shared development user.
USER_ID_HEADER: str = "X-User-Id"
DEFAULT_USER_ID: str = "anonymous"


# --- PROXIMITY ---
# Stored values must keep this exact capitalization.
VALID_PROXIMITIES: List[str] = ["Close", "Medium", "Far"]
DEFAULT_PROXIMITY: str = "Medium"


# --- LOGGING ---
LOG_LEVEL: str = os.environ.get("PEOPLE_TRACKER_LOG_LEVEL", "INFO").upper()
# Loggers of the database driver stay quieter than the application.
DRIVER_LOG_LEVEL: str = "WARNING"
