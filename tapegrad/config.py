# tapegrad/config.py
"""
Package-wide defaults.

The scalar type of a tape is a numpy floating dtype. float64 is the default;
float32 tapes are supported and keep their values and derivative
accumulators in single precision.
"""

import logging

import numpy as np

DEFAULT_DTYPE = np.float64

# Conventional AdamW constants (Loshchilov & Hutter).
ADAMW_BETA1 = 0.9
ADAMW_BETA2 = 0.999
ADAMW_EPSILON = 1e-8
ADAMW_WEIGHT_DECAY = 0.01


def enable_debug_logging(level: int = logging.DEBUG) -> logging.Handler:
    """
    Attach a stream handler to the ``tapegrad`` logger.

    The library itself never configures handlers; this is a convenience for
    interactive sessions and notebooks.

    Returns:
        The handler that was added, so callers can remove it again.
    """
    pkg_logger = logging.getLogger("tapegrad")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level)
    return handler
