"""Core console configuration and theme for razlib UI.

Every other UI module prints through these console instances.
"""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

# =============================================================================
# Theme Configuration
# =============================================================================

RAZLIB_THEME = Theme(
    {
        # Status colors
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        # Text styles
        "step": "bold cyan",
        "title": "bold white",
        "dim": "dim",
        "highlight": "bold magenta",
        # Domain styles
        "level": "bold magenta",
        "number": "yellow",
        "path": "cyan",
        "audio": "green",
        "hint": "dim italic",
    }
)

# =============================================================================
# Console Instances
# =============================================================================

# Primary console for normal output
console = Console(theme=RAZLIB_THEME, stderr=False)

# Error console for stderr output
err_console = Console(theme=RAZLIB_THEME, stderr=True)
