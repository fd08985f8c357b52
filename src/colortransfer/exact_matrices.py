"""
Matrix data and constants for the Reinhard color transfer pipeline.

Based on: Erik Reinhard, Michael Ashikhmin, Bruce Gooch and Peter Shirley,
"Color Transfer between Images", IEEE CG&A 21(5), pp. 34-41, 2001.

All tables are module-level constants marked read-only. The log(LMS) <-> Lαβ
pair is built analytically so that one is the exact inverse of the other,
and LMS -> RGB is the numerical inverse of RGB -> LMS, which keeps an
unmodified image stable through a forward/inverse round trip.
"""

import numpy as np


def _frozen(matrix: np.ndarray) -> np.ndarray:
    matrix = np.ascontiguousarray(matrix, dtype=np.float64)
    matrix.setflags(write=False)
    return matrix


# =============================================================================
# RGB <-> LMS (cone response)
# =============================================================================

# RGB to LMS, as published by Reinhard et al.
RGB_TO_LMS = _frozen(
    [
        [0.3811, 0.5783, 0.0402],
        [0.1967, 0.7244, 0.0782],
        [0.0241, 0.1288, 0.8444],
    ]
)

# Rounded inverse printed in the paper. Kept for reference only: its product
# with RGB_TO_LMS is off the identity by ~5e-4, which shows up as drift on
# round trips.
PUBLISHED_LMS_TO_RGB = _frozen(
    [
        [4.4679, -3.5873, 0.1193],
        [-1.2186, 2.3809, -0.1624],
        [0.0497, -0.2439, 1.2045],
    ]
)

LMS_TO_RGB = _frozen(np.linalg.inv(RGB_TO_LMS))


# =============================================================================
# log(LMS) <-> Lαβ (decorrelation)
# =============================================================================

_LOGLMS_TO_LAB_SCALE = np.diag([1.0 / np.sqrt(3.0), 1.0 / np.sqrt(6.0), 1.0 / np.sqrt(2.0)])
_LOGLMS_TO_LAB_BASIS = np.array(
    [
        [1.0, 1.0, 1.0],
        [1.0, 1.0, -2.0],
        [1.0, -1.0, 0.0],
    ]
)

_LAB_TO_LOGLMS_BASIS = np.array(
    [
        [1.0, 1.0, 1.0],
        [1.0, 1.0, -1.0],
        [1.0, -2.0, 0.0],
    ]
)
_LAB_TO_LOGLMS_SCALE = np.diag([np.sqrt(3.0) / 3.0, np.sqrt(6.0) / 6.0, np.sqrt(2.0) / 2.0])

LOGLMS_TO_LAB = _frozen(_LOGLMS_TO_LAB_SCALE @ _LOGLMS_TO_LAB_BASIS)
LAB_TO_LOGLMS = _frozen(_LAB_TO_LOGLMS_BASIS @ _LAB_TO_LOGLMS_SCALE)


# Channel layout of a decorrelated buffer
LUMINANCE_CHANNEL = 0
CHROMINANCE_CHANNELS = (1, 2)
N_CHANNELS = 3
