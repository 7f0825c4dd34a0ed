"""
Application configuration settings.

Values come from ``Settings`` (environment variables and ``.env``) and are
exposed here as module-level constants.
"""

from .settings_model import Settings

SETTINGS = Settings()

# ─────────────────────────────────────────────────────────────────────────────
# Version
# ─────────────────────────────────────────────────────────────────────────────

VERSION = SETTINGS.VERSION

# ─────────────────────────────────────────────────────────────────────────────
# Endpoints and Probing
# ─────────────────────────────────────────────────────────────────────────────

CONFIG_FILE = SETTINGS.CONFIG_FILE
PROBE_INTERVAL = SETTINGS.PROBE_INTERVAL
PROBE_JITTER_SECONDS = SETTINGS.PROBE_JITTER_SECONDS
PING_TIMEOUT_SECONDS = SETTINGS.PING_TIMEOUT_SECONDS
MAX_CONCURRENT_PINGS = SETTINGS.MAX_CONCURRENT_PINGS
HOST_SAMPLE_INTERVAL = SETTINGS.HOST_SAMPLE_INTERVAL

# ─────────────────────────────────────────────────────────────────────────────
# Resource Limits
# ─────────────────────────────────────────────────────────────────────────────

MAX_WORKER_THREADS = SETTINGS.MAX_WORKER_THREADS
SHUTDOWN_TIMEOUT_SECONDS = SETTINGS.SHUTDOWN_TIMEOUT_SECONDS

# ─────────────────────────────────────────────────────────────────────────────
# Metrics
# ─────────────────────────────────────────────────────────────────────────────

# SECURITY: defaults to localhost; the endpoint has no authentication
METRICS_ADDR = SETTINGS.METRICS_ADDR
METRICS_PORT = SETTINGS.METRICS_PORT

# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────

LOG_LEVEL = SETTINGS.LOG_LEVEL
LOG_FILE = SETTINGS.LOG_FILE
