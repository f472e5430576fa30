from . import math_utils, wad_ray_math

__all__ = (
    "math_utils",
    "wad_ray_math",
)
