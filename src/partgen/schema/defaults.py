"""
Default settings and numeric constants for the samplers.
"""

import math

DEFAULT_POLICY = "unrestricted"
DEFAULT_METHOD = "pdc"
DEFAULT_TILT_METHOD = "bisection"
DEFAULT_LOG_LEVEL = "quiet"
DEFAULT_COUNT = 1

VALID_METHODS = ("pdc", "rejection", "expected")
VALID_TILT_METHODS = ("bisection", "fast")
VALID_LOG_LEVELS = ("info", "quiet")

# Bisection stops once the bracket residuals differ by less than this.
BISECTION_TOLERANCE = 1e-5
BISECTION_MAX_ITERS = 1000

# pi / sqrt(6); the unrestricted tilt is asymptotically 1 - c / sqrt(n).
TILT_CONSTANT = math.pi / math.sqrt(6.0)

# Largest target covered by the precomputed unrestricted tilt table.
TILT_TABLE_MAX = 200
