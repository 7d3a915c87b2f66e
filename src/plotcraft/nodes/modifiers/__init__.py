"""
Modifier modules package.

Modifiers transform the layers they receive: affine transforms,
displacement, clipping and subdivision.
"""

from plotcraft.nodes.modifiers.clip import CLIP_CIRCLE_MODULE, CLIP_RECT_MODULE
from plotcraft.nodes.modifiers.displace import JITTER_MODULE, NOISE_DISPLACE_MODULE
from plotcraft.nodes.modifiers.subdivide import SUBDIVIDE_MODULE, subdivide_path
from plotcraft.nodes.modifiers.transform import ROTATE_MODULE, SCALE_MODULE

MODIFIER_MODULES = [
    ROTATE_MODULE,
    SCALE_MODULE,
    JITTER_MODULE,
    NOISE_DISPLACE_MODULE,
    CLIP_RECT_MODULE,
    CLIP_CIRCLE_MODULE,
    SUBDIVIDE_MODULE,
]

__all__ = [
    "CLIP_CIRCLE_MODULE",
    "CLIP_RECT_MODULE",
    "JITTER_MODULE",
    "MODIFIER_MODULES",
    "NOISE_DISPLACE_MODULE",
    "ROTATE_MODULE",
    "SCALE_MODULE",
    "SUBDIVIDE_MODULE",
    "subdivide_path",
]
