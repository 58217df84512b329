"""Path constants for Infinite Comic settings and log output."""

from pathlib import Path

SETTINGS_FILE = Path(__file__).parent.parent / "settings.json"

# Go up from src/settings to src/, then up to project root, then into logs/
LOGS_DIR = Path(__file__).parent.parent.parent / "logs"
