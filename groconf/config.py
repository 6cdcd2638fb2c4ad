"""Application constants for groconf."""

from __future__ import annotations

import logging

APP_NAME = "groconf"
APP_VERSION = "0.1.0"

DEFAULT_LOG_LEVEL = logging.INFO

# Fixed-width atom record layout (0-based, half-open column ranges).
GRO_RESNAME_COLUMNS = (5, 10)
GRO_ATOMNAME_COLUMNS = (10, 15)
GRO_POSITION_START = 20
GRO_VELOCITY_START = 44
GRO_MIN_LINE_LENGTH = 44
GRO_FIELD_WIDTH = 8
GRO_NAME_WIDTH = 5

# Fixed-point precision of written fields.
GRO_POSITION_DECIMALS = 3
GRO_VELOCITY_DECIMALS = 4
GRO_BOX_WIDTH = 12
GRO_BOX_DECIMALS = 5

# Residue and atom numbers occupy five columns and wrap around.
GRO_INDEX_MODULUS = 100_000
