# settings.py

# Window / display
WINDOW_WIDTH = 960
WINDOW_HEIGHT = 720
FPS = 60
TITLE = "Heat Run"

# Colors
COLOR_BG = (15, 15, 20)
COLOR_PLAYER = (220, 210, 90)
COLOR_ENEMY = (200, 80, 80)
COLOR_GOAL = (120, 200, 255)

# World
TILE_SIZE = 64

# Presentation pacing (seconds). The simulation never waits on these.
MOVE_ANIM_SECONDS = 0.2
ATTACK_ANIM_SECONDS = 0.5
ENEMY_GAP_SECONDS = 0.25

# Rules (defaults for engine.config.RulesConfig)
MAX_HEAT = 100
STARTING_HEAT = 0
ACTIONS_PER_TURN = 3
ATTACK_HEAT_COST = 10
ATTACK_DAMAGE = 1
MAX_CONSECUTIVE_BURN_TILES = 2
ENEMY_ATTACK_HEAT = 5
ENEMY_HEALTH = 2
ENEMY_TURN_FREQUENCY = 1
ENEMIES_ATTACK = True
