import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

# Editor timings (seconds)
AUTOSAVE_DELAY_SECONDS = float(os.getenv("AUTOSAVE_DELAY_SECONDS", "2.0"))
AUTOSAVE_SAVED_DISPLAY_SECONDS = float(os.getenv("AUTOSAVE_SAVED_DISPLAY_SECONDS", "2.0"))

# Local drafts older than this are discarded on startup
DRAFT_MAX_AGE_HOURS = float(os.getenv("DRAFT_MAX_AGE_HOURS", "24"))
DRAFT_STORE_PATH = os.getenv("DRAFT_STORE_PATH", ".notebook/drafts.json")

DEFAULT_NOTE_COLOR = os.getenv("DEFAULT_NOTE_COLOR", "#FFF9C4")

CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]
