# core/settings.py

TITLE = "Tower Rounds"
WIDTH = 960
HEIGHT = 540
FPS = 60
MAX_FRAME_DT = 0.05           # clamp long frames so timers don't skip whole intervals

# Colors (R,G,B)
BG_COLOR = (18, 18, 24)
PATH_COLOR = (70, 70, 88)
TOWER_COLOR = (120, 190, 255)
HUD_COLOR = (245, 245, 255)
SPAWN_MARKER_COLOR = (217, 51, 230)
ENEMY_COLOR = (255, 77, 77)

# --- Rounds ---
STARTING_ROUND = 1
ROUND_START_DELAY = 2.0       # seconds between a cleared round and the next one
BASE_ENEMIES_PER_ROUND = 3
ENEMIES_PER_ROUND_INCREMENT = 2

HEALTH_MULTIPLIER_PER_ROUND = 0.15
SPEED_MULTIPLIER_PER_ROUND = 0.05
DAMAGE_MULTIPLIER_PER_ROUND = 0.10
MAX_HEALTH_BONUS = 2.0        # soft caps; <= 0 means uncapped linear growth
MAX_SPEED_BONUS = 0.6
MAX_DAMAGE_BONUS = 1.5

# --- Round density ---
SPAWN_INTERVAL_REDUCTION_PER_ROUND = 0.03
MIN_SPAWN_INTERVAL_MULTIPLIER = 0.35   # clamped to [0.05, 1]
EXTRA_SPAWNS_PER_ROUND = 0.05
MAX_EXTRA_SPAWNS = 2.0

# --- Spawning ---
SPAWN_INTERVAL = 2.0          # seconds between spawn ticks (before round scaling)
SPAWN_ONE_PER_TICK = True     # False = burst: spawns_per_tick on every lane each interval
SPAWN_CONTINUOUS = False      # True = no rounds, round-robin one spawn per interval
TYPE_BASED_SPAWNING = True

ENEMY_SPEED = 60.0            # px/s
ENEMY_MAX_HEALTH = 5.0
DAMAGE_TO_TOWER = 1.0
DEFENDER_ATTACK_RANGE = 36.0  # px
DEFENDER_ATTACK_INTERVAL = 0.6
DAMAGE_TO_DEFENDER = 1.0
ENEMY_RADIUS = 10

# --- Pooling ---
POOLING_ENABLED = True
POOL_WARM_UP = 8              # per type

# --- Economy ---
STARTING_MONEY = 200
REWARD_PER_KILL = 50

# --- Tower ---
TOWER_MAX_HEALTH = 20.0
TOWER_RANGE = 170.0           # px
TOWER_ATTACK_INTERVAL = 0.5
TOWER_DAMAGE = 1.0
TOWER_RADIUS = 22

# Upgrade ladder: (label, cost, health multiplier, damage multiplier)
TOWER_UPGRADES = [
    ("Reinforced Walls", 50, 1.2, 1.2),
    ("Heavy Bolts", 120, 1.1, 1.5),
    ("Citadel", 300, 1.5, 1.5),
]
