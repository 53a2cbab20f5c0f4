"""
Generation configuration.

Defaults live on the GenerationConfig dataclass; config/generation_config.json
may override any of them.
"""

import json
import logging
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

from towergen.config import (
    GAME_WIDTH, DESIGN_WIDTH, WALL_WIDTH, WALL_MARGIN, TILE,
    PLATFORM_WIDTH, PLATFORM_HEIGHT, SAME_LINE_EPS, MIN_VERTICAL_SPACING,
    MAZE_MIN_GAP,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / 'config' / 'generation_config.json'


@dataclass
class GenerationConfig:
    """Tunables for row generation, pacing and hazard margin."""
    # World geometry
    game_width: int = GAME_WIDTH
    design_width: int = DESIGN_WIDTH
    wall_width: int = WALL_WIDTH
    wall_margin: int = WALL_MARGIN
    tile: int = TILE

    # Platform rows
    platform_width: int = PLATFORM_WIDTH
    platform_height: int = PLATFORM_HEIGHT
    min_platform_width: int = 64
    same_line_eps: int = SAME_LINE_EPS
    min_vertical_spacing: int = MIN_VERTICAL_SPACING
    validation_range: int = 500
    hard_band_tier: int = 3

    # Pacing
    tutorial_rows: int = 3
    spawn_buffer: int = 1200
    cleanup_distance: int = 900
    start_platform_y: float = 560
    max_rows_per_update: int = 8

    # Mazes
    maze_cooldown_rows: int = 10
    maze_row_thickness: int = TILE
    maze_min_gap: int = MAZE_MIN_GAP
    maze_safety_platform_width: int = 200

    # Enemies
    enemy_min_platform_width: int = 64
    safe_zone_padding: int = 10
    enemy_spawn_safe_padding: int = 10
    enemy_pool_grow_size: int = 4

    # Items
    items_enabled: bool = True
    coin_chance: float = 0.6
    powerup_min_distance: float = 2000.0
    powerup_cooldown: float = 15.0
    item_spacing: int = 128
    item_spot_attempts: int = 12
    item_pool_grow_size: int = 8

    # Riser
    riser_type: str = 'lava'
    riser_start_offset: float = 400
    riser_enabled: bool = True

    world_seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _coerce(name: str, current: Any, value: Any) -> Any:
    if current is None or value is None:
        return value
    expected = type(current)
    if expected is bool:
        if not isinstance(value, bool):
            raise ValueError(f"{name} expects a boolean, got {value!r}")
        return value
    if expected in (int, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{name} expects a number, got {value!r}")
        return expected(value) if expected is float else value
    if not isinstance(value, expected):
        raise ValueError(f"{name} expects {expected.__name__}, got {value!r}")
    return value


def config_from_dict(data: Dict[str, Any]) -> GenerationConfig:
    """Build a GenerationConfig from a mapping; unknown keys are ignored."""
    config = GenerationConfig()
    known = {f.name for f in fields(GenerationConfig)}
    for key, value in data.items():
        if key not in known:
            logger.warning("Unknown generation config key ignored: %s", key)
            continue
        setattr(config, key, _coerce(key, getattr(config, key), value))
    return config


def load_generation_config(path: Optional[Union[str, Path]] = None) -> GenerationConfig:
    """
    Load generation settings from JSON.

    Args:
        path: JSON file to read. Defaults to config/generation_config.json

    Returns:
        GenerationConfig with file values applied over the defaults
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        logger.info("Generation config not found at %s, using defaults", config_path)
        return GenerationConfig()

    data = json.loads(config_path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{config_path} must contain a JSON object")
    return config_from_dict(data)
