"""Constants for tracevault."""

# Subprocess timeouts (seconds)
GIT_TIMEOUT = 30

# Directory (relative to repo root) holding tracevault state
TRACEVAULT_DIR = ".tracevault"

# Version snapshot history
MAX_SNAPSHOTS = 50
AUTO_SAVE_DEBOUNCE_MS = 2000
AUTO_SAVE_MESSAGE = "Auto-save"
MANUAL_SNAPSHOT_TAG = "manual"

# Max commits read per artifact history
HISTORY_DEPTH = 100

# Shown when an artifact revision cannot be resolved
NO_REVISION = "—"
