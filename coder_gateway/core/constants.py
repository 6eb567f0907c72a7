"""
Project constants definitions
"""

# ============================================================
# Deployment Binary
# ============================================================

BINARY_PREFIX = "coder"
BINARY_ENDPOINT = "/bin"
BINARY_URL_PLACEHOLDER = "{{url}}"
BINARY_MODE = 0o755
GLOBAL_CONFIG_DIRNAME = "config"

DEFAULT_DOWNLOAD_TIMEOUT = 60
DEFAULT_PROCESS_TIMEOUT = 30
DOWNLOAD_CHUNK_SIZE = 64 * 1024

# Oldest telemetry records are dropped past this many per kind
TELEMETRY_MAX_RECORDS = 1000

# ============================================================
# Local Directories
# ============================================================

CONFIG_DIR_NAME = "coderv2"
DATA_DIR_NAME = "coder-gateway"

ENV_CODER_CONFIG_DIR = "CODER_CONFIG_DIR"
ENV_XDG_CONFIG_HOME = "XDG_CONFIG_HOME"
ENV_XDG_DATA_HOME = "XDG_DATA_HOME"
ENV_HOME = "HOME"
ENV_APPDATA = "APPDATA"
ENV_LOCALAPPDATA = "LOCALAPPDATA"

# ============================================================
# SSH Config
# ============================================================

SSH_CONFIG_PATH = "~/.ssh/config"
SSH_CONFIG_MODE = 0o600
SSH_DIR_MODE = 0o700

BLOCK_START_MARKER = "# --- START CODER JETBRAINS {name}"
BLOCK_END_MARKER = "# --- END CODER JETBRAINS {name}"
HOST_ALIAS = "coder-jetbrains--{target}--{name}"
SSH_SESSION_TYPE = "JetBrains"

# ============================================================
# Logging
# ============================================================

DEFAULT_LOG_DIR = "~/.coder-gateway/logs"
