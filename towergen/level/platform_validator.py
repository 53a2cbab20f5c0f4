"""
Platform Validator - keeps newly placed platforms clear of active ones
"""

from dataclasses import replace
from typing import List, Optional

from towergen.core.movement import ReachabilityConstraints
from towergen.level.generation_config import GenerationConfig
from towergen.level.row_data import Platform


class PlatformValidator:
    """Tracks active platforms and rejects overlapping or crowded placements"""

    def __init__(self, constraints: ReachabilityConstraints, config: GenerationConfig):
        self.config = config
        # Spacing can never exceed what a safe jump covers
        self.min_vertical_spacing = min(config.min_vertical_spacing, constraints.dy_safe.min)
        self.same_line_eps = config.same_line_eps
        self.validation_range = config.validation_range
        self.active: List[Platform] = []

    def is_valid_position(self, candidate: Platform) -> bool:
        nearby = [p for p in self.active if abs(p.y - candidate.y) <= self.validation_range]
        for platform in nearby:
            dy = abs(platform.y - candidate.y)
            if dy < self.same_line_eps or dy < self.min_vertical_spacing:
                return False
        rect = candidate.rect
        return not any(rect.colliderect(p.rect) for p in nearby)

    def next_legal_y(self, candidate: Platform, highest_y: float, step: float = 8) -> Optional[float]:
        """Nearest y at or above the candidate that clears every active platform, never above highest_y."""
        y = candidate.y
        while y >= highest_y:
            if self.is_valid_position(replace(candidate, y=y)):
                return y
            y -= step
        return None

    def track(self, platform: Platform) -> None:
        self.active.append(platform)

    def cleanup(self, limit_y: float) -> int:
        """Stop tracking platforms below limit_y; returns how many were dropped."""
        before = len(self.active)
        self.active = [p for p in self.active if p.y <= limit_y]
        return before - len(self.active)

    def clear(self) -> None:
        self.active = []
