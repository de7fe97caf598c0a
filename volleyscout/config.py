from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MATCHES_DIR = PROJECT_ROOT / "matches"

SAVE_PREFIX = "volleyscout_save_"

# Logical court drawing units (two 9x9 halves)
COURT_LENGTH = 18.0
COURT_WIDTH = 9.0
HIT_RADIUS = 1.5

# Drawing surface viewport around the court: (min_x, min_y, width, height)
COURT_VIEW_BOX = (-1.0, -0.5, 20.0, 10.0)

# Serve start points sit just outside each baseline
SERVE_OFFSET = 0.5

LONG_PRESS_SECONDS = 1.5

DEFAULT_MATCH_NAME = "match"
DEFAULT_MY_NAME = "我方球隊"
DEFAULT_OP_NAME = "對手球隊"

ACTION_LABELS = {
    "Serve": "發球",
    "Attack": "攻擊",
    "Block": "攔網",
    "Dig": "接扣",
    "Set": "舉球",
    "Receive": "接發",
}

CSV_HEADER = [
    "Set",
    "Timestamp",
    "Score (My)",
    "Score (Op)",
    "Serving",
    "Player",
    "Position",
    "Action",
    "Result",
    "Note",
]
