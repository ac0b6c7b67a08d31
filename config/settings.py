"""Central Configuration for the IMC Bot."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Base Directory (Root of the project)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load Environment Variables
load_dotenv(BASE_DIR / ".env")

# Paths
STATE_STORAGE_PATH = Path(os.getenv("IMC_STATE_PATH", BASE_DIR / ".state"))
PERSIST_STATE = os.getenv("IMC_PERSIST_STATE", "true").lower() in ("1", "true", "yes")

# Choice prompt: minimum similarity for a fuzzy match to count
CHOICE_MATCH_THRESHOLD = float(os.getenv("IMC_CHOICE_THRESHOLD", "0.6"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
