from pathlib import Path


# Repository root (src/platform/constant/path.py -> repo)
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Log directory
LOG_DIR = BASE_DIR / 'logs'
