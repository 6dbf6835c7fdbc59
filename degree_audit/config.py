"""
Configuration constants for the degree audit system.

This module contains all configuration values and constants used throughout
the audit engine. Centralizing these makes it easy to adjust behavior when
a faculty changes its course numbering or default credit weights.
"""

import logging
import os
import re
from pathlib import Path

# =============================================================================
# FILE PATHS
# =============================================================================

# Base data directory (relative to this file's location)
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"
# Bundled requirement documents, loadable by bare name ("applied_mathematics")
REQUIREMENTS_DIR = DATA_DIR / "requirements"


# =============================================================================
# COURSE CODES
# =============================================================================
# A course code is PREFIX + digits + SUFFIX:
#   - CS2103T  -> prefix "CS", level 2, suffix "T"
#   - MA1101R  -> prefix "MA", level 1, suffix "R"
#   - ST2131   -> prefix "ST", level 2, suffix ""
# The level is the first digit of the number (2xxx modules are level 2).

COURSE_CODE_PATTERN = re.compile(
    r"^(?P<prefix>[A-Z]+)(?P<level>\d)\d+(?P<suffix>[A-Z]*)$"
)

# Credit weight given to a course named by a requirement document when the
# document's credit table does not mention it. Most modules are 4 credits.
DEFAULT_CREDITS = 4


# =============================================================================
# EVALUATION DEFAULTS
# =============================================================================

# Multi-module baskets stop collecting courses once the credit requirement
# is reached unless told otherwise.
DEFAULT_EARLY_TERMINATE = True

# How many levels of titled baskets the explainability snapshot expands.
# Untitled baskets (single-course leaves, anonymous groups) are free.
DEFAULT_MEANINGFUL_DEPTH = 2


# =============================================================================
# REMOTE REQUIREMENT DOCUMENTS
# =============================================================================

HTTP_TIMEOUT = 15
HTTP_RETRIES = 3
HTTP_BACKOFF_FACTOR = 1
HTTP_RETRY_STATUSES = [429, 500, 502, 503, 504]


# =============================================================================
# LOGGING
# =============================================================================

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_LEVEL = getattr(
    logging, os.environ.get("DEGREE_AUDIT_LOG_LEVEL", "WARNING").upper(), logging.WARNING
)
