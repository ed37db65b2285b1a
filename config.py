"""
config.py — Application Defaults
=================================
Loaded by the Flask app with `app.config.from_object(Config)`; any key
can then be overridden from the environment with a GRAPHAV_ prefix,
e.g.  GRAPHAV_DEFAULT_DELAY=0  or  GRAPHAV_LOG_LEVEL=DEBUG.

The engine never reads this module.  The web layer hands the values to
the Controller / renderer as plain arguments.
"""

from engine.controller import SPEED_PRESETS


class Config:
    SECRET_KEY = None               # random per process when unset
    MAX_SESSIONS = 500              # live contexts kept; least recently used dropped first

    # --- playback ---
    DEFAULT_DELAY     = 50          # ms; 0 = run to completion, -1 = single step
    TRACE_ACTIONS     = True        # automatic steps: one action (True) / one iteration
    TICK_INTERVAL_MS  = 25          # how often the browser polls /api/av/tick
    SPEED_PRESETS     = dict(SPEED_PRESETS)

    # --- display ---
    LDV_DISPLAY_LIMIT = 10
    CANVAS_WIDTH      = 900
    CANVAS_HEIGHT     = 600
    SHOW_EDGE_LENGTHS = False

    # --- default graph ---
    RANDOM_VERTICES         = 12
    RANDOM_EDGE_PROBABILITY = 0.25
    RANDOM_SEED             = 42
    GRID_ROWS               = 5
    GRID_COLS               = 6

    # --- logging ---
    LOG_LEVEL  = "INFO"
    LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class TestConfig(Config):
    TESTING       = True
    SECRET_KEY    = "test"
    DEFAULT_DELAY = 50
    LOG_LEVEL     = "DEBUG"
