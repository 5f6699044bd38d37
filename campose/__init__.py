"""Camera pose (extrinsics) utilities for world/camera coordinate conversion."""

__version__ = "0.1.0"

from . import utils
from . import geometry
from . import calibration
