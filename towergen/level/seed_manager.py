"""
Seed Manager - deterministic random streams for terrain generation
"""

import hashlib
import random
from typing import Dict, Optional

COMPONENTS = ('platforms', 'mazes', 'enemies', 'items', 'pacing', 'riser', 'decorations')


def _derive(seed_string: str) -> int:
    seed_hash = hashlib.md5(seed_string.encode()).hexdigest()
    return int(seed_hash[:8], 16)


class SeedManager:
    """Hands out one seeded random.Random per generation component"""

    def __init__(self, world_seed: Optional[int] = None):
        """
        Args:
            world_seed: Master seed for the run. If None, a random seed is drawn.
        """
        self.world_seed = world_seed if world_seed is not None else random.randint(0, 2**31 - 1)
        self.sub_seeds: Dict[str, int] = {}
        self._rng_instances: Dict[str, random.Random] = {}
        self.generate_sub_seeds()

    def generate_sub_seeds(self) -> Dict[str, int]:
        """Derive a sub-seed for every known component from the world seed."""
        self.sub_seeds = {
            component: _derive(f"{self.world_seed}_{component}")
            for component in COMPONENTS
        }
        self._rng_instances = {}
        return dict(self.sub_seeds)

    def get_random(self, component: str) -> random.Random:
        """
        Get the random stream for a component.

        Unknown component names get a sub-seed derived on the fly, so callers
        can add streams without touching COMPONENTS.
        """
        if component not in self._rng_instances:
            if component not in self.sub_seeds:
                self.sub_seeds[component] = _derive(f"{self.world_seed}_{component}")
            self._rng_instances[component] = random.Random(self.sub_seeds[component])
        return self._rng_instances[component]

    def set_world_seed(self, seed: int):
        self.world_seed = seed
        self.generate_sub_seeds()

    def get_seed_info(self) -> Dict[str, object]:
        return {
            'world_seed': self.world_seed,
            'sub_seeds': self.sub_seeds.copy(),
        }
