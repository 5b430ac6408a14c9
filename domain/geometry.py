"""
Logical tower coordinates.

Towers are addressed by discretizing their mean eta and phi. In the barrel
an eta bin of 0.085 and a phi bin of pi/36 correspond to the groups of 5 by 5
crystals that calorimeter towers are built from.
"""

import math

# Width of one logical eta bin
ETA_BIN_WIDTH = 0.085

# Number of phi bins per pi for EB-style binning
EB_PHI_BINS_PER_PI = 36

# HB acceptance is covered by this many eta bins, centered on eta = 0
HB_ETA_DIVS = 34

# Number of phi bins over the full 2 pi
HB_PHI_DIVS = 72
HB_PHI_BIN_WIDTH = 2 * math.pi / HB_PHI_DIVS


def eta_bin(eta: float) -> int:
    """Signed logical eta coordinate, floor(eta / 0.085)."""
    return math.floor(eta / ETA_BIN_WIDTH)


def eb_phi_bin(phi: float) -> int:
    """Signed logical phi coordinate, floor(36 phi / pi)."""
    return math.floor(phi / math.pi * EB_PHI_BINS_PER_PI)


def hb_eta_index(eta: float) -> int:
    """
    Zero-based HB eta bin index.

    Values outside ``range(HB_ETA_DIVS)`` are outside the HB acceptance.
    """
    return eta_bin(eta) + HB_ETA_DIVS // 2


def hb_phi_bin(phi: float) -> int:
    """Signed phi bin with width 2 pi / 72."""
    return math.floor(phi / HB_PHI_BIN_WIDTH)


def eta_bin_center(ieta: int) -> float:
    """Center of the signed logical eta bin ``ieta``."""
    return (ieta + 0.5) * ETA_BIN_WIDTH
