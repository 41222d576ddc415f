"""Global configuration and constants for the binding layer."""

from __future__ import annotations

import os
from typing import Final

# Ring buffer sizes for diagnostics
DEFAULT_TRACE_CAPACITY: Final = int(os.environ.get("CHARTBIND_TRACE_CAPACITY", "50"))
DEFAULT_LOG_CAPACITY: Final = int(os.environ.get("CHARTBIND_LOG_CAPACITY", "500"))
DEFAULT_ERROR_CAPACITY: Final = int(os.environ.get("CHARTBIND_ERROR_CAPACITY", "20"))

# Indentation used by ConfigNode.to_json(); empty string means compact output
JSON_INDENT: Final = os.environ.get("CHARTBIND_JSON_INDENT", "")

PATH_DELIMITER: Final = "/"
LOGGER_NAME: Final = "chartbind"
