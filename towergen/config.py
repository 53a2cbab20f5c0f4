# Display
WIDTH, HEIGHT = 400, 640
FPS = 60

# World geometry
GAME_WIDTH = 400
DESIGN_WIDTH = 400
WALL_WIDTH = 32
WALL_MARGIN = 28
TILE = 32

# Movement physics (px, seconds)
GRAVITY_Y = 1200
JUMP_VELOCITY = -600
MAX_SPEED_X = 276

# Reachability ratios
DY_SAFE_RATIO = (0.55, 0.80)
DY_HARD_RATIO = (0.80, 0.92)
DX_SAFE_RATIO = 0.70
DX_HARD_RATIO = 0.88
REACH_EFFICIENCY = 0.9

# Platforms
PLATFORM_WIDTH = 128
PLATFORM_HEIGHT = 32
SAME_LINE_EPS = 32
MIN_VERTICAL_SPACING = 160

# Maze
MAZE_MIN_GAP = 96
MAZE_GAP_MARGIN_RATIO = 0.25
MAZE_GAP_MARGIN_MAX = 20

# Colors (demo host)
BG = (18, 16, 28)
WHITE = (240, 240, 240)
CYAN = (80, 220, 230)
PLATFORM_COLOR = (120, 110, 160)
MOVING_COLOR = (90, 170, 220)
MAZE_COLOR = (96, 84, 120)
WALL_COLOR = (40, 36, 56)
ENEMY_COLORS = {
    "patrol": (230, 90, 80),
    "shooter": (240, 170, 60),
    "jumper_shooter": (200, 90, 220),
    "spike": (200, 200, 210),
}
ITEM_COLORS = {
    "coin": (250, 215, 70),
    "powerup": (90, 230, 160),
}
RISER_COLORS = {
    "lava": (240, 80, 30),
    "water": (40, 120, 240),
    "acid": (120, 230, 60),
    "fire": (255, 140, 0),
}
