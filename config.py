"""
Configuration constants for the Dijkstra step visualizer.

Tunable parameters live here.  Anything deployment-specific can be
overridden from the environment — never hardcode secrets.
"""

import os
import secrets

# =============================================================================
# Playback Configuration
# =============================================================================

# Seconds between automatic forward steps while playing
DEFAULT_STEP_DELAY = float(os.environ.get("STEP_DELAY", "1.0"))

# Lower bound for the inter-step delay (keeps the browser poll loop sane)
MIN_STEP_DELAY = 0.05

# Named speeds offered by the UI (seconds per step)
SPEED_PRESETS = {
    "slow":   2.0,    # teaching mode
    "medium": 1.0,
    "fast":   0.4,    # demo mode
    "turbo":  0.1,
}

# How often the browser polls /api/state while playing (milliseconds)
POLL_INTERVAL_MS = 100

# =============================================================================
# Canvas Configuration
# =============================================================================

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 500
NODE_RADIUS = 20

# =============================================================================
# Graph Input Configuration
# =============================================================================

# Preset loaded for a fresh session
DEFAULT_PRESET = os.environ.get("DEFAULT_PRESET", "simple")

# Random generator defaults / bounds
RANDOM_DEFAULT_NODES = 6
RANDOM_MAX_NODES = 20
RANDOM_DEFAULT_PROBABILITY = 0.4
RANDOM_MAX_WEIGHT = 20

# Largest adjacency matrix the matrix input accepts
MATRIX_MAX_SIZE = 10

# =============================================================================
# Server Configuration
# =============================================================================

SECRET_KEY = os.environ.get("SECRET_KEY") or secrets.token_hex(32)

# Live browser sessions kept in memory; the least recently used is dropped past this
MAX_SESSIONS = int(os.environ.get("MAX_SESSIONS", "256"))

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "5000"))

# =============================================================================
# Logging Configuration
# =============================================================================

# Log level (DEBUG, INFO, WARNING, ERROR)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
