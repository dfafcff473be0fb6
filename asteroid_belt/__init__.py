"""
Asteroid Belt Package
=====================

Dodge-and-collect arcade game. The belt_core subpackage holds the
simulation:

- Fixed-tick game loop with start/quit session lifecycle
- Obstacle/pickup spawning with a difficulty ramp
- Bounding-box collision against the player ship
- Lives, score and high-score persistence

All tunable parameters are in game_config.yaml.
"""
