"""Terrain sources for foothold placement."""

from typing import Callable, Optional

import numpy as np


class FunctionTerrain:
    """Terrain map backed by a height function ``height(x, y) -> z``.

    Without a height function the terrain reports no elevation data, and the
    preview engine falls back to its flat-ground foothold heuristic.
    """

    def __init__(self, height_func: Optional[Callable[[float, float], float]] = None):
        self.height_func = height_func

    def has_elevation_data(self) -> bool:
        return self.height_func is not None

    def elevation_at(self, position_xy: np.ndarray) -> float:
        if self.height_func is None:
            raise RuntimeError("Terrain has no elevation data")
        return float(self.height_func(float(position_xy[0]), float(position_xy[1])))
