"""
Configuration settings for the Syncthing status aggregator.
"""
import os
from pathlib import Path

# Daemon connection
DEFAULT_BASE_URL = "http://localhost:8384"
API_KEY_ENV = "SYNCTHING_API_KEY"
BASE_URL_ENV = "SYNCTHING_BASE_URL"

# REST endpoints
EVENTS_PATH = "rest/events"
CONNECTIONS_PATH = "rest/system/connections"
CONFIG_PATH = "rest/system/config"

# Event kinds requested from the long-polling events endpoint
FOLDER_COMPLETION = "FolderCompletion"
DEVICE_DISCONNECTED = "DeviceDisconnected"
EVENT_TYPES = (FOLDER_COMPLETION, DEVICE_DISCONNECTED)

# Rendering
STATUS_GLYPH = "\uf2f1"
TOOLTIP_COLUMN_WIDTH = 10
COMPLETE_PCT = 100.0

# Logging
STATE_DIR = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state")) / "syncwatch"
LOG_FILE = STATE_DIR / "syncwatch.log"
DEFAULT_LOG_LEVEL = "WARNING"
