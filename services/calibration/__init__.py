"""
Calibration services.

Offline jobs deriving filter parameters from data.
"""

from .hot_counts import parse_hot_counts, load_hot_counts
from .hb_calibrator import HBCalibrator, HBBinResult, write_good_hb_config

__all__ = [
    "parse_hot_counts",
    "load_hot_counts",
    "HBCalibrator",
    "HBBinResult",
    "write_good_hb_config",
]
