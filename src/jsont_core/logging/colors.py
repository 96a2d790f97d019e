"""ANSI color codes for terminal log output.

All colors use the 256-color palette.

Usage:
    from jsont_core.logging.colors import GREEN, RED, RESET

    print(f"{GREEN}Compiled{RESET}")
"""

RESET = "\033[0m"

# Status
GREEN = "\033[38;5;82m"  # Success
RED = "\033[38;5;196m"  # Failure
YELLOW = "\033[38;5;226m"  # Warnings

# Information
LIGHT_BLUE = "\033[38;5;153m"  # Context / metrics
CYAN = "\033[38;5;51m"  # Info
MAGENTA = "\033[38;5;201m"  # Compile component

SUCCESS = GREEN
FAILURE = RED
WARNING = YELLOW
INFO = LIGHT_BLUE

__all__ = [
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
    "SUCCESS",
    "FAILURE",
    "WARNING",
    "INFO",
]
