# votebox/config.py
# Central place for settings and constants, read from the environment (.env supported)
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _optional_int(name: str):
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return int(value)


# "memory" or "mongo"
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")

# --- Database Config ---
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "voting_system")
# Multi-document transactions need a replica set
MONGO_TRANSACTIONS = _flag("MONGO_TRANSACTIONS")

# --- Seed data ---
# Plaintext unless HASH_ADMIN_PASSWORDS is on
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "UNIQUE")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "UNIQUE123")
HASH_ADMIN_PASSWORDS = _flag("HASH_ADMIN_PASSWORDS")
SEED_SAMPLE_CANDIDATES = _flag("SEED_SAMPLE_CANDIDATES", "true")

SAMPLE_CANDIDATES = [
    {"name": "John Mitchell", "experience": "15 years in public service"},
    {"name": "Sarah Chen", "experience": "Former Mayor, 8 years"},
    {"name": "Robert Taylor", "experience": "Business Leader, Community Advocate"},
]

# Turnout denominator; turnout is reported as null when unset
ELIGIBLE_VOTERS = _optional_int("ELIGIBLE_VOTERS")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
