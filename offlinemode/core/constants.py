import os
import tempfile
from pathlib import Path

# Load environment variables from .env file
from dotenv import load_dotenv

# Load .env from project root, then from the working directory
_project_root = Path(__file__).parent.parent.parent
load_dotenv(_project_root / ".env")
load_dotenv()

# Timer defaults (milliseconds)
HEARTBEAT_INTERVAL_MS = int(os.getenv("OFFLINEMODE_HEARTBEAT_INTERVAL_MS", "60000"))
PING_TIMEOUT_MS = int(os.getenv("OFFLINEMODE_PING_TIMEOUT_MS", "10000"))

# Reachability endpoint, relative to the server base URL
PING_PATH = os.getenv("OFFLINEMODE_PING_PATH", "PING")

# Seconds between network link checks
LINK_POLL_INTERVAL = float(os.getenv("OFFLINEMODE_LINK_POLL_INTERVAL", "2.0"))

# Temporary directory (cross-platform)
TMPDIR = os.environ.get("OFFLINEMODE_TMPDIR", os.path.join(tempfile.gettempdir(), "offlinemode"))

# Log files
LOG_FILE = os.path.join(TMPDIR, "offlinemode.log")

# Configuration directory
CONFIG_DIR = os.path.expanduser("~/.config/offlinemode")
