#!/usr/bin/env python3
"""Validate the maze pattern library against the reachability envelope.

Checks, for every pattern and both mirror states:
- every row is emitted (none skipped as unreachable)
- consecutive rows are within the hard vertical band
- every opening is at least the minimum maze gap wide

Usage: python tools/validate_patterns.py
"""
import logging
import random
import sys

from towergen.core.movement import MovementPhysics
from towergen.level.generation_config import load_generation_config
from towergen.level.maze_spawner import MazeSpawner
from towergen.level.pattern_library import PATTERN_LIBRARY

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

config = load_generation_config()
constraints = MovementPhysics().constraints
spawner = MazeSpawner(constraints, config, PATTERN_LIBRARY, random.Random(0), decorate=False)
errors = []

for index in range(len(PATTERN_LIBRARY)):
    pattern = PATTERN_LIBRARY.get_pattern(index)
    for mirrored in (False, True):
        rows = spawner.spawn_maze_row_from_config(0, index, mirrored, False)
        tag = f"maze {index + 1} ({pattern.name}){' mirrored' if mirrored else ''}"
        if len(rows) != pattern.row_count:
            errors.append(f"{tag}: {pattern.row_count - len(rows)} rows skipped")
        for prev, row in zip(rows, rows[1:]):
            if not constraints.is_reachable(0, prev.y - row.y):
                errors.append(f"{tag}: row {row.pattern_row} too far above row {prev.pattern_row}")
        for row in rows:
            gap_width = row.gap[1] - row.gap[0]
            # free-standing centre blocks leave two narrower side openings
            against_wall = any(p.left <= config.wall_width or p.right >= config.game_width - config.wall_width
                               for p in row.platforms)
            if against_wall and gap_width < config.maze_min_gap:
                errors.append(f"{tag}: row {row.pattern_row} opening {gap_width:.0f}px is narrower than {config.maze_min_gap}px")

if errors:
    logger.error('Validation FAILED:')
    for e in errors:
        logger.error(' - %s', e)
    sys.exit(2)

logger.info('Validation OK: %d patterns within the jump envelope', len(PATTERN_LIBRARY))
sys.exit(0)
