# world/enemy_defs.py
"""
Enemy type catalog lives here so you can tune spawns without touching lane code.

Each entry is a dict:
{
  "id": 0,                       # stable type id (pool key), must be >= 0
  "name": "Grunt",
  "weight": 5,                   # relative spawn weight, <= 0 never spawns
  "speed": 1.0,                  # multipliers on round stats (<= 0 treated as 1)
  "health": 1.0,
  "tower_damage": 1.0,
  "defender_damage": 1.0,
  "attack_range": None,          # set a number to override the base range
  "attack_interval": None,       # same for the attack interval
  "priority": "tower_first",     # or "defender_first"
  "damage_taken": 1.0,           # in (0, 1]; lower = tankier
  "enrage": {"trigger": 0.3, "speed": 0.5, "damage": 0.5, "interval": 0.7},
  "color": (r, g, b),
}
"""

ENEMY_TYPES = [
    {
        "id": 0,
        "name": "Grunt",
        "weight": 6,
        "color": (255, 77, 77),
    },
    {
        "id": 1,
        "name": "Runner",
        "weight": 3,
        "speed": 1.8,
        "health": 0.6,
        "tower_damage": 0.5,
        "color": (255, 200, 80),
    },
    {
        "id": 2,
        "name": "Brute",
        "weight": 1.5,
        "speed": 0.6,
        "health": 3.0,
        "tower_damage": 2.5,
        "damage_taken": 0.7,
        "attack_interval": 1.2,
        "enrage": {"trigger": 0.35, "speed": 0.6, "damage": 0.5, "interval": 0.6},
        "color": (160, 170, 190),
    },
    {
        "id": 3,
        "name": "Raider",
        "weight": 2,
        "speed": 1.2,
        "defender_damage": 2.0,
        "attack_range": 60.0,
        "priority": "defender_first",
        "color": (180, 120, 255),
    },
]
