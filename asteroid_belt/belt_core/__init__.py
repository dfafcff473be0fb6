"""
Belt Core - The simulation core of Asteroid Belt.

This module provides the game loop driver, the Gymnasium environment
wrapper, and all supporting systems (spawning, collisions, scoring,
persistence).

Main exports:
- CoreGame: Tick-driven game session (start/tick/quit)
- InputState: Held left/right flags for one tick
- AsteroidBeltEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
- ScoreHistory / CredentialStore: Plaintext file collaborators
"""

from asteroid_belt.belt_core.config_loader import GameConfig, load_config
from asteroid_belt.belt_core.entities import Entity, EntityKind, Rect
from asteroid_belt.belt_core.spawner import Spawner
from asteroid_belt.belt_core.collision import CollisionEngine, EventType, LifecycleEvent
from asteroid_belt.belt_core.scoring import ScoreTracker, split_life_indicators
from asteroid_belt.belt_core.score_store import ScoreHistory
from asteroid_belt.belt_core.credentials import CredentialStore, RegistrationError
from asteroid_belt.belt_core.state_snapshot import FrameSnapshot
from asteroid_belt.belt_core.game import CoreGame, GameState, InputState, SessionSummary
from asteroid_belt.belt_core.env_gym import AsteroidBeltEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Entity",
    "EntityKind",
    "Rect",
    "Spawner",
    "CollisionEngine",
    "EventType",
    "LifecycleEvent",
    "ScoreTracker",
    "split_life_indicators",
    "ScoreHistory",
    "CredentialStore",
    "RegistrationError",
    "FrameSnapshot",
    "CoreGame",
    "GameState",
    "InputState",
    "SessionSummary",
    "AsteroidBeltEnv",
]
