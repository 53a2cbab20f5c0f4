"""
Pattern Library - static catalog of maze patterns and decoration layouts

Maze widths are authored for a 400 px design width and scaled by the maze
spawner. Every maze enters and exits through a centred split row so that
consecutive mazes and platform rows always line up.
"""

from dataclasses import dataclass, replace
from enum import Enum
import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from towergen.core.errors import PatternNotFound

logger = logging.getLogger(__name__)


class MazeRowType(str, Enum):
    LEFT = 'left'      # block against the left wall, gap on the right
    RIGHT = 'right'    # block against the right wall, gap on the left
    SPLIT = 'split'    # blocks on both walls, gap in between
    CENTER = 'center'  # free-standing block, gap on one side


@dataclass(frozen=True)
class MazeRowDef:
    type: MazeRowType
    width: int
    width2: int = 0

    def mirrored(self) -> 'MazeRowDef':
        """Horizontal mirror: left and right swap, split widths swap."""
        if self.type == MazeRowType.LEFT:
            return MazeRowDef(MazeRowType.RIGHT, self.width, self.width2)
        if self.type == MazeRowType.RIGHT:
            return MazeRowDef(MazeRowType.LEFT, self.width, self.width2)
        if self.type == MazeRowType.SPLIT:
            return MazeRowDef(MazeRowType.SPLIT, self.width2, self.width)
        return self


@dataclass(frozen=True)
class MazePattern:
    name: str
    rows: Tuple[MazeRowDef, ...]
    difficulty: str = 'easy'
    weight: float = 1.0

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class DecorationItem:
    x: float
    y: float
    type: str = 'random'


@dataclass(frozen=True)
class DecorationPattern:
    """Decoration placements in normalized [0, 1] x [0, 1] segment space."""
    name: str
    density: float
    items: Tuple[DecorationItem, ...] = ()

    def project(self, left: float, right: float, top_y: float, height: float) -> List[Tuple[float, float, str]]:
        """Map normalized items to world points inside a segment."""
        width = right - left
        return [(left + item.x * width, top_y + item.y * height, item.type) for item in self.items]

    def transformed(self, transform) -> 'DecorationPattern':
        """Same pattern with its normalized points passed through a TRANSFORMS entry."""
        points = transform([(item.x, item.y) for item in self.items])
        items = tuple(DecorationItem(x, y, item.type) for (x, y), item in zip(points, self.items))
        return replace(self, items=items)


def _split(w1=128, w2=128):
    return MazeRowDef(MazeRowType.SPLIT, w1, w2)


def _left(w):
    return MazeRowDef(MazeRowType.LEFT, w)


def _right(w):
    return MazeRowDef(MazeRowType.RIGHT, w)


def _center(w):
    return MazeRowDef(MazeRowType.CENTER, w)


# 1-based maze numbers per difficulty group
DIFFICULTY_GROUPS: Dict[str, Tuple[int, ...]] = {
    'easy': (3, 4, 5, 6, 8, 9, 10, 11),
    'medium': (1, 2, 12, 14),
    'hard': (7, 13, 15),
}

_MAZE_DEFINITIONS = (
    ("Zigzag", (_split(), _left(224), _right(224), _left(224), _right(224), _split())),
    ("L Block", (_split(), _left(192), _right(224), _right(224), _left(192), _split())),
    ("Stairs Left", (_split(), _left(96), _left(192), _left(256), _right(160), _split())),
    ("Center Tunnel", (_split(), _split(), _left(192), _split(), _split())),
    ("Three Alternating", (_split(), _left(224), _right(224), _left(224), _split())),
    ("Four Alternating", (_split(), _left(192), _right(192), _left(192), _right(192), _split())),
    ("Left Wall Stack", (_split(), _left(160), _left(192), _left(224), _left(224), _split())),
    ("Zigzag Reversed", (_split(), _right(224), _left(224), _right(224), _left(224), _split())),
    ("S Curve", (_split(), _left(160), _right(192), _left(224), _right(192), _split())),
    ("Closing Tunnel", (_split(), _split(96, 96), _split(160, 160), _split(96, 96), _split())),
    ("Stairs Right", (_split(), _right(96), _right(192), _right(256), _left(160), _split())),
    ("Pincer", (_split(), _left(160), _right(160), _left(192), _right(192), _split())),
    ("Rapid Switch", (_split(), _left(192), _right(192), _left(192), _right(192), _left(192), _split())),
    ("Center Blocks", (_split(), _center(96), _center(160), _center(128), _split())),
    ("Mixed", (_split(), _left(160), _split(), _right(224), _left(192), _split())),
)

_DECORATION_DEFINITIONS = (
    ('SPARSE_SCATTER', 0.1, ((0.2, 0.2), (0.8, 0.7))),
    ('ALTERNATING_SIDES', 0.15, ((0.2, 0.15), (0.8, 0.5), (0.2, 0.85))),
    ('CENTER_SPACED', 0.1, ((0.5, 0.2), (0.5, 0.6))),
    ('ZIGZAG_WIDE', 0.15, ((0.2, 0.2), (0.8, 0.5), (0.2, 0.8))),
    ('DIAGONAL_WIDE', 0.15, ((0.2, 0.2), (0.5, 0.5), (0.8, 0.8))),
    ('EMPTY_REST', 0.0, ()),
    ('TRIANGLE_SETUP', 0.15, ((0.5, 0.2), (0.2, 0.7), (0.8, 0.7))),
)


def _difficulty_of(number: int) -> str:
    for group, numbers in DIFFICULTY_GROUPS.items():
        if number in numbers:
            return group
    return 'easy'


class PatternLibrary:
    """Registry of maze and decoration patterns, indexed by plain integers."""

    def __init__(self, decorations: Optional[Sequence[DecorationPattern]] = None):
        self._patterns: List[MazePattern] = []
        self._decorations: List[DecorationPattern] = []
        self._initialize_default_patterns()
        if decorations is not None:
            self._decorations = list(decorations)

    def _initialize_default_patterns(self):
        for number, (name, rows) in enumerate(_MAZE_DEFINITIONS, start=1):
            self.register_pattern(MazePattern(name=name, rows=rows, difficulty=_difficulty_of(number)))
        for name, density, points in _DECORATION_DEFINITIONS:
            items = tuple(DecorationItem(x, y) for x, y in points)
            self._decorations.append(DecorationPattern(name, density, items))

    def register_pattern(self, pattern: MazePattern) -> int:
        """Add a maze pattern and return its index."""
        if not pattern.rows:
            raise ValueError(f"maze pattern {pattern.name!r} has no rows")
        self._patterns.append(pattern)
        return len(self._patterns) - 1

    def __len__(self) -> int:
        return len(self._patterns)

    def get_pattern(self, index: int) -> MazePattern:
        """
        Look up a maze pattern by index.

        Raises:
            PatternNotFound: for a non-integer or out-of-range index
        """
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._patterns):
            raise PatternNotFound(index, len(self._patterns))
        return self._patterns[index]

    def find_pattern(self, index: int) -> Optional[MazePattern]:
        """Like get_pattern but logs and returns None when missing."""
        try:
            return self.get_pattern(index)
        except PatternNotFound as exc:
            logger.warning("Maze pattern lookup failed: %s", exc)
            return None

    def indices_in_groups(self, groups: Iterable[str]) -> List[int]:
        wanted = set(groups)
        return [i for i, p in enumerate(self._patterns) if p.difficulty in wanted]

    def random_index(self, rng: random.Random, groups: Sequence[str] = ('easy', 'medium'),
                     exclude: Optional[int] = None) -> Optional[int]:
        """
        Pick a weighted random pattern index from the given difficulty groups.

        The excluded index is only returned when it is the sole candidate.
        """
        pool = self.indices_in_groups(groups)
        if not pool:
            return None
        if exclude is not None and len(pool) > 1:
            pool = [i for i in pool if i != exclude] or pool
        weights = [self._patterns[i].weight for i in pool]
        return rng.choices(pool, weights=weights, k=1)[0]

    @property
    def decorations(self) -> List[DecorationPattern]:
        return list(self._decorations)

    def get_decoration(self, name: str) -> Optional[DecorationPattern]:
        for pattern in self._decorations:
            if pattern.name == name:
                return pattern
        return None


# Transforms for normalized point sets

def mirror_x(points: Sequence[Tuple[float, float]]) -> List[Tuple[float, float]]:
    return [(1.0 - x, y) for x, y in points]


def mirror_y(points: Sequence[Tuple[float, float]]) -> List[Tuple[float, float]]:
    return [(x, 1.0 - y) for x, y in points]


def mirror_xy(points: Sequence[Tuple[float, float]]) -> List[Tuple[float, float]]:
    return [(1.0 - x, 1.0 - y) for x, y in points]


TRANSFORMS = {
    'none': lambda points: list(points),
    'mirror_x': mirror_x,
    'mirror_y': mirror_y,
    'mirror_xy': mirror_xy,
}

DEFAULT_TRANSFORM_WEIGHTS = {'none': 40, 'mirror_x': 30, 'mirror_y': 15, 'mirror_xy': 15}


def choose_transform(rng: random.Random, weights: Optional[Dict[str, float]] = None) -> str:
    """Weighted pick of a transform name; non-positive weights are skipped."""
    weights = weights or DEFAULT_TRANSFORM_WEIGHTS
    names = [name for name, w in weights.items() if w > 0 and name in TRANSFORMS]
    if not names:
        return 'none'
    return rng.choices(names, weights=[weights[n] for n in names], k=1)[0]


PATTERN_LIBRARY = PatternLibrary()
