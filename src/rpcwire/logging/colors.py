"""ANSI color codes for terminal log output.

All colors use the 256-color palette.

Usage:
    from rpcwire.logging.colors import GREEN, RESET

    print(f"{GREEN}ok{RESET}")
"""

RESET = "\033[0m"

GREEN = "\033[38;5;82m"  # Success - bright green
RED = "\033[38;5;196m"  # Errors - bright red
YELLOW = "\033[38;5;226m"  # Warnings - bright yellow
LIGHT_BLUE = "\033[38;5;153m"  # Debug - light blue
CYAN = "\033[38;5;51m"  # Info - cyan
MAGENTA = "\033[38;5;201m"  # Logger names - magenta

__all__ = [
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
