"""
Movement physics and the reachability envelope derived from it.

Every spawner consults ReachabilityConstraints before emitting a row. The
constraints are always computed from the physics constants, never tuned by
hand, so changing gravity or jump velocity keeps the feasibility guarantee.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import hashlib
import json
import math
import random

from towergen.config import (
    GRAVITY_Y, JUMP_VELOCITY, MAX_SPEED_X,
    DY_SAFE_RATIO, DY_HARD_RATIO, DX_SAFE_RATIO, DX_HARD_RATIO, REACH_EFFICIENCY,
)
from towergen.core.errors import InvalidPhysicsConstants, UnreachableGapAttempt


@dataclass(frozen=True)
class Band:
    """Closed interval of legal gap magnitudes."""
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def clamp(self, value: float) -> float:
        return max(self.min, min(self.max, value))

    def sample(self, rng: random.Random) -> float:
        return rng.uniform(self.min, self.max)


@dataclass(frozen=True)
class ReachabilityConstraints:
    time_to_apex: float
    max_jump_height: float
    max_air_time: float
    max_horizontal_reach: float
    dy_safe: Band
    dy_hard: Band
    dx_safe: float
    dx_hard: float

    def is_reachable(self, dx: float, dy: float) -> bool:
        """True when a gap of (dx, dy) lies inside the hard envelope.

        dy is measured upward (previous.y - next.y) and may be negative when
        the next row sits lower than the previous one.
        """
        return abs(dx) <= self.dx_hard and abs(dy) <= self.dy_hard.max

    def check_gap(self, dx: float, dy: float) -> None:
        if not self.is_reachable(dx, dy):
            raise UnreachableGapAttempt(dx, dy, self.dx_hard, self.dy_hard.max)

    def clamp_dy(self, dy: float) -> float:
        return max(-self.dy_hard.max, min(self.dy_hard.max, dy))

    def clamp_dx(self, dx: float) -> float:
        return max(-self.dx_hard, min(self.dx_hard, dx))

    def as_dict(self) -> Dict[str, Any]:
        return {
            'time_to_apex': self.time_to_apex,
            'max_jump_height': self.max_jump_height,
            'max_air_time': self.max_air_time,
            'max_horizontal_reach': self.max_horizontal_reach,
            'dy_safe': [self.dy_safe.min, self.dy_safe.max],
            'dy_hard': [self.dy_hard.min, self.dy_hard.max],
            'dx_safe': self.dx_safe,
            'dx_hard': self.dx_hard,
        }


def _require_positive(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidPhysicsConstants(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidPhysicsConstants(f"{name} must be positive and finite, got {value!r}")
    return value


def compute_constraints(gravity: float, jump_velocity: float, max_speed_x: float) -> ReachabilityConstraints:
    """
    Derive the reachability envelope from movement constants.

    Args:
        gravity: Downward acceleration in px/s^2
        jump_velocity: Launch velocity in px/s; only its magnitude is used
        max_speed_x: Top horizontal run speed in px/s

    Returns:
        Immutable ReachabilityConstraints

    Raises:
        InvalidPhysicsConstants: if any input is non-positive or not finite
    """
    g = _require_positive('gravity', gravity)
    try:
        v0 = abs(float(jump_velocity))
    except (TypeError, ValueError):
        raise InvalidPhysicsConstants(f"jump_velocity must be a number, got {jump_velocity!r}")
    v0 = _require_positive('jump_velocity', v0)
    vx = _require_positive('max_speed_x', max_speed_x)

    time_to_apex = v0 / g
    max_jump_height = (v0 * v0) / (2 * g)
    max_air_time = 2 * time_to_apex
    max_reach = vx * max_air_time * REACH_EFFICIENCY

    return ReachabilityConstraints(
        time_to_apex=time_to_apex,
        max_jump_height=max_jump_height,
        max_air_time=max_air_time,
        max_horizontal_reach=max_reach,
        dy_safe=Band(max_jump_height * DY_SAFE_RATIO[0], max_jump_height * DY_SAFE_RATIO[1]),
        dy_hard=Band(max_jump_height * DY_HARD_RATIO[0], max_jump_height * DY_HARD_RATIO[1]),
        dx_safe=max_reach * DX_SAFE_RATIO,
        dx_hard=max_reach * DX_HARD_RATIO,
    )


@dataclass(frozen=True)
class MovementPhysics:
    gravity: float = GRAVITY_Y
    jump_velocity: float = JUMP_VELOCITY
    max_speed_x: float = MAX_SPEED_X
    constraints: Optional[ReachabilityConstraints] = field(default=None, compare=False)
    motion_version: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        constraints = compute_constraints(self.gravity, self.jump_velocity, self.max_speed_x)
        # Use object.__setattr__ to assign to frozen fields
        object.__setattr__(self, 'constraints', constraints)
        object.__setattr__(self, 'motion_version', self._compute_version())

    def _compute_version(self) -> str:
        core_attrs = {
            'gravity': float(self.gravity),
            'jump_velocity': float(self.jump_velocity),
            'max_speed_x': float(self.max_speed_x),
        }
        core_attrs_str = json.dumps(core_attrs, sort_keys=True)
        version_hash = hashlib.sha256(core_attrs_str.encode('utf-8')).hexdigest()
        return f"m-{version_hash[:12]}"


def load_movement_physics(gravity=GRAVITY_Y, jump_velocity=JUMP_VELOCITY, max_speed_x=MAX_SPEED_X) -> MovementPhysics:
    """Factory to create MovementPhysics and compute its constraints."""
    return MovementPhysics(gravity=gravity, jump_velocity=jump_velocity, max_speed_x=max_speed_x)
