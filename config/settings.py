import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default="0"):
    return str(os.getenv(name, default) or default).strip().lower() in {
        "1",
        "true",
        "yes",
        "y",
        "on",
    }


BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"
EVENTS_DIR = Path(os.getenv("EVENTS_DIR", str(DATA_DIR / "events")))

PROXY_BASE_URL = str(
    os.getenv("PROXY_BASE_URL", "https://tuneflip-spotify-proxy.vercel.app") or ""
).strip().rstrip("/")
TRACK_SEARCH_PATH = "/api/itunes-search"
GENRE_CATALOG_PATH = "/api/itunes-genres"

REQUEST_TIMEOUT_SEC = max(1.0, float(os.getenv("REQUEST_TIMEOUT_SEC", "8.0") or 8.0))
BUCKET_TIMEOUT_SEC = max(1.0, float(os.getenv("BUCKET_TIMEOUT_SEC", "10.0") or 10.0))
GENRE_CACHE_TTL_SEC = max(60, int(os.getenv("GENRE_CACHE_TTL_SEC", "3600") or "3600"))

DEFAULT_GENRE_ID = int(os.getenv("DEFAULT_GENRE_ID", "21") or 21)  # Rock
PAGE_SIZE = max(1, int(os.getenv("PAGE_SIZE", "20") or 20))
FETCH_LIMIT_MULTIPLIER = max(1, int(os.getenv("FETCH_LIMIT_MULTIPLIER", "3") or 3))
SEARCH_LIMIT = max(1, int(os.getenv("SEARCH_LIMIT", "30") or 30))

MAX_PER_ARTIST = max(1, int(os.getenv("MAX_PER_ARTIST", "2") or 2))
ARTIST_COOLDOWN = max(0, int(os.getenv("ARTIST_COOLDOWN", "3") or 3))
COOLDOWN_DAYS = max(0.0, float(os.getenv("COOLDOWN_DAYS", "14") or 14))
MAX_COOLDOWN_DAYS = 3650

LIKED_ARTIST_BOOST = 2
DISLIKED_ARTIST_PENALTY = -2

# Filter floors
MIN_AFTER_DISLIKE_FILTER = 5
MIN_COOLDOWN_RETENTION = 0.6
MAX_GENRE_FLOOR = 10

# Seed mixing (all odd, 32-bit)
SEED_INDEX_MIX = 0x9E3779B1
SEED_SHUFFLE_MIX = 0x2545F491

ARTWORK_SIZE = 600

KARAOKE_PATTERNS = {
    "karaoke": r"\bkaraoke\b",
    "tribute": r"\btribute\b",
    "instrumental": r"\binstrumental\b",
    "in_the_style": r"\bin\s+the\s+style\s+of\b",
    "made_famous": r"\bmade\s+famous\s+by\b",
    "originally_performed": r"\boriginally\s+performed\s+by\b",
    "backing_track": r"\bbacking\s+track\b",
}

FALLBACK_GENRES = [
    {"id": "20", "name": "Alternative", "label": "Music ▸ Alternative"},
    {"id": "6", "name": "Country", "label": "Music ▸ Country"},
    {"id": "14", "name": "Pop", "label": "Music ▸ Pop"},
    {"id": "21", "name": "Rock", "label": "Music ▸ Rock"},
    {"id": "15", "name": "R&B/Soul", "label": "Music ▸ R&B/Soul"},
    {"id": "18", "name": "Hip-Hop/Rap", "label": "Music ▸ Hip-Hop/Rap"},
]
MAX_GENRE_RESULTS = 200

DEMO_FALLBACK_ENABLED = _env_flag("DEMO_FALLBACK_ENABLED", "0")
DEMO_TRACKS = [
    {
        "id": "demo-1",
        "title": "SoundHelix Song 1 (demo)",
        "artist": "SoundHelix • Demo",
        "album": "Demo Pack",
        "albumArtUrl": "https://picsum.photos/seed/demo1/1200/1200",
        "previewUrl": "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-1.mp3",
        "storeUrl": "https://www.soundhelix.com/examples",
    },
    {
        "id": "demo-2",
        "title": "Future Bass (demo)",
        "artist": "Pixabay • Demo",
        "album": "Demo Pack",
        "albumArtUrl": "https://picsum.photos/seed/demo2/1200/1200",
        "previewUrl": "https://cdn.pixabay.com/download/audio/2022/10/21/audio_3bb3fefc2e.mp3?filename=future-bass-12457.mp3",
        "storeUrl": "https://pixabay.com/music/",
    },
]

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 8000))
