# Global configuration for Pinch Tetris

BOARD_COLS = 10
BOARD_ROWS = 20
CELL_SIZE = 24  # px
FPS = 60
VIEWPORT_WIDTH = 1280
VIEWPORT_HEIGHT = 800

# Zones (px)
SPAWN_ZONE_HEIGHT = 220
SPAWN_TICKS = 6               # gravity ticks a fresh piece spends in the spawn zone
BOARD_BOTTOM_MARGIN = 60
SPAWN_LANE_TOP = 30           # lane start below the spawn zone top
SPAWN_LANE_TRAVEL = SPAWN_ZONE_HEIGHT - 50

# Gravity (ms)
GRAVITY_INTERVAL_MS = 600

# Hold slots: first half pinned left, second half pinned right
HOLD_SLOT_COUNT = 6
HOLD_CAPACITY = 3
HOLD_SLOT_WIDTH = 90
HOLD_SLOT_HEIGHT = 70
HOLD_GAP = 20
HOLD_MARGIN = 40              # distance from the viewport edge
HOLD_TOP = 60
HOLD_TOLERANCE = 10           # drop/highlight slack around a slot
HOLD_STACK_OFFSET = 18        # horizontal offset between stacked pieces
HOLD_SPAWN_DELAY_MS = 2000

# Pinch (normalized thumb-index distance)
GRAB_THRESHOLD = 0.09         # grab when below
RELEASE_THRESHOLD = 0.15      # release when above

# Targeting / smoothing
TARGET_RADIUS = 120           # px
SMOOTHING_IDLE = 0.3
SMOOTHING_DRAG = 0.5
DRAG_EASE = 0.6

# Play-zone control, two hands: left moves, right rotates
TWO_HAND_MOVE_THRESHOLD = 30  # px
TWO_HAND_MOVE_COOLDOWN_MS = 100
TWO_HAND_ROTATE_RADIUS = 30   # px
TWO_HAND_ROTATE_COOLDOWN_MS = 200

# Play-zone control, one hand does both
ONE_HAND_MOVE_THRESHOLD = 35
ONE_HAND_MOVE_COOLDOWN_MS = 120
ONE_HAND_ROTATE_RADIUS = 40
ONE_HAND_ROTATE_COOLDOWN_MS = 250

GESTURE_CIRCLE_RADIUS = 70    # px, render feedback only

# Hard drop when a play-zone grab is released
RELEASE_HARD_DROP = True

# Colors (R, G, B)
COLORS = {
    "bg": (255, 255, 255),
    "grid": (238, 238, 238),
    "frame": (120, 120, 120),
    "text": (60, 60, 60),
    "dim": (170, 170, 170),
    "warn": (200, 0, 0),
    # Tetromino colors
    "I": (0, 206, 209),
    "O": (255, 215, 0),
    "T": (147, 112, 219),
    "S": (50, 205, 50),
    "Z": (255, 99, 71),
    "J": (65, 105, 225),
    "L": (255, 140, 0),
}
