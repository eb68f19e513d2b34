import os
from pathlib import Path
from typing import List, Tuple
from dotenv import load_dotenv

# Load environment variables from .env file in the project root
load_dotenv()

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).resolve().parent.parent
STORE_ROOT = Path(os.getenv("SASSVIEW_HOME", str(Path.home() / ".sassview")))
LOG_DIR = STORE_ROOT / "logs"
CACHE_DIR = STORE_ROOT / "cache"

# Ensure directories exist
for d in [LOG_DIR, CACHE_DIR]:
    try:
        d.mkdir(parents=True, exist_ok=True)
    except Exception:
        # Fallback to local
        d = PROJECT_ROOT / ".sassview" / d.name
        d.mkdir(parents=True, exist_ok=True)

if not CACHE_DIR.exists():
    CACHE_DIR = PROJECT_ROOT / ".sassview" / "cache"
if not LOG_DIR.exists():
    LOG_DIR = PROJECT_ROOT / ".sassview" / "logs"

CACHE_DB_PATH = CACHE_DIR / "compiled_css.sqlite"
GRAPH_DB_PATH = CACHE_DIR / "import_graph.sqlite"


def _split_env_list(name: str, default: str, sep: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(sep) if item.strip()]


# --- View Lookup Configuration ---
# Roots searched for stylesheet views, in priority order
VIEW_PATHS: List[str] = _split_env_list("SASSVIEW_VIEW_PATHS", "app/views", os.pathsep)

# Formats tried before format-less files (e.g. "application.css.scss")
STYLESHEET_FORMATS: Tuple[str, ...] = tuple(_split_env_list("SASSVIEW_FORMATS", "css", ","))

# --- Compiler Configuration ---
OUTPUT_STYLES = {"nested", "expanded", "compact", "compressed"}

OUTPUT_STYLE = os.getenv("SASSVIEW_OUTPUT_STYLE", "nested")
if OUTPUT_STYLE not in OUTPUT_STYLES:
    OUTPUT_STYLE = "nested"

try:
    PRECISION = int(os.getenv("SASSVIEW_PRECISION", "5"))
except ValueError:
    PRECISION = 5

# Import URIs that are plain CSS and never go through an importer
CSS_IMPORT_PREFIXES = ("http://", "https://", "//")
