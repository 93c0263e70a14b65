"""Schema Diff - Compare installed and defined field storage schemas."""

import logging

__version__ = "0.1.0"
__author__ = "Schema Diff Team"
__license__ = "Apache-2.0"

# Keep YAML parsing chatter out of the report output
logging.getLogger("yaml").setLevel(logging.WARNING)
