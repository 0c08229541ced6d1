"""
Game Type Registry - config-driven registration of tournament formats.

Formats register themselves at import time; a YAML file can disable any of
them for a deployment without code changes.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import yaml

from bracket_league.exceptions import UnknownGameTypeError
from bracket_league.game_types.base import GameType

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/game_types.yaml"


class GameTypeRegistry:
    """
    Central registry for game types.

    Usage:
        MARCH_MADNESS = GameTypeRegistry.register(BracketGameType(...))

        game_type = GameTypeRegistry.get("march_madness")
    """
    _game_types: Dict[str, GameType] = {}
    _config: Optional[Dict] = None

    @classmethod
    def register(cls, game_type: GameType) -> GameType:
        """Register a game type under its type_id and return it unchanged."""
        if game_type.type_id in cls._game_types:
            logger.warning(f"Replacing registered game type: {game_type.type_id}")
        cls._game_types[game_type.type_id] = game_type
        logger.debug(f"Registered game type: {game_type.type_id}")
        return game_type

    @classmethod
    def load_config(cls, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Dict:
        """Load registry configuration from YAML (cached after first load)."""
        if cls._config is not None:
            return cls._config

        path = Path(config_path)
        if not path.exists():
            logger.debug(f"Config not found: {config_path}, using defaults")
            cls._config = {}
            return cls._config

        with open(path, "r") as f:
            cls._config = yaml.safe_load(f) or {}

        logger.info(f"Loaded game type config from {config_path}")
        return cls._config

    @classmethod
    def disabled(cls, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> set:
        return set(cls.load_config(config_path).get("disabled_game_types", []))

    @classmethod
    def get(cls, type_id: str, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> GameType:
        """
        Look up an enabled game type.

        Raises:
            UnknownGameTypeError: If nothing is registered under type_id or it is disabled
        """
        game_type = cls._game_types.get(type_id)
        if game_type is None or type_id in cls.disabled(config_path):
            raise UnknownGameTypeError(type_id)
        return game_type

    @classmethod
    def available(cls, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> List[GameType]:
        """Enabled game types, ordered by id."""
        disabled = cls.disabled(config_path)
        return [gt for tid, gt in sorted(cls._game_types.items()) if tid not in disabled]

    @classmethod
    def list_game_types(cls, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> List[Dict[str, Any]]:
        """List enabled game types with their format details."""
        return [gt.info() for gt in cls.available(config_path)]

    @classmethod
    def clear(cls):
        """Clear all registered game types (for testing)."""
        cls._game_types = {}
        cls._config = None

    @classmethod
    def reset_config(cls):
        cls._config = None
