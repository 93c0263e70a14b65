"""Color definitions for console output.

This module provides the Rich color names used by the diff and
requirements displays.
"""


class DiffColors:
    """Centralized color palette for Schema Diff console output.

    Reference: https://rich.readthedocs.io/en/stable/appendix/colors.html
    """

    # Semantic colors for messages
    INFO = "cyan"
    SUCCESS = "green"
    WARNING = "yellow"
    ERROR = "red"

    # Diff lines
    CONTEXT = "dim"
    ADDED = "green"
    REMOVED = "red"
    ADDED_HIGHLIGHT = "bold black on green"
    REMOVED_HIGHLIGHT = "bold black on red"
    MARKER = "bold"

    # UI elements
    BORDER = "blue"
    HEADER = "bold bright_white"
    LINK = "underline cyan"
