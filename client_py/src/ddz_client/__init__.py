"""Client for the three-seat Dou Dizhu card game."""

from .client import GameClient
from .config import ClientConfig, create_config, default_config
from .recommend import recommend

__all__ = [
    "ClientConfig",
    "GameClient",
    "create_config",
    "default_config",
    "recommend",
]
