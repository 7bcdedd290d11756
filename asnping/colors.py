"""
Terminal colour scheme for asnping output.
"""

import sys
import os
from typing import Optional


class NeonColors:
    """ANSI palette"""

    RESET = '\033[0m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'

    NEON_GREEN = '\033[92m'
    NEON_CYAN = '\033[96m'
    NEON_MAGENTA = '\033[95m'
    NEON_YELLOW = '\033[93m'
    NEON_RED = '\033[91m'
    NEON_BLUE = '\033[94m'
    NEON_WHITE = '\033[97m'
    NEON_ORANGE = '\033[38;5;208m'
    NEON_PINK = '\033[38;5;198m'

    RAINBOW_COLORS = [
        NEON_RED, NEON_ORANGE, NEON_YELLOW,
        NEON_GREEN, NEON_CYAN, NEON_BLUE, NEON_MAGENTA
    ]


class ColorScheme:
    """Semantic colours for the different kinds of output"""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled and self._supports_color()

    @staticmethod
    def _supports_color() -> bool:
        """Check if terminal supports color output"""
        return (
            hasattr(sys.stdout, "isatty") and
            sys.stdout.isatty() and
            sys.platform != "win32"
        ) or "FORCE_COLOR" in os.environ

    def colorize(self, text: str, color: str) -> str:
        if not self.enabled:
            return text
        return f"{color}{text}{NeonColors.RESET}"

    def success(self, text: str) -> str:
        return self.colorize(text, NeonColors.NEON_GREEN + NeonColors.BOLD)

    def warning(self, text: str) -> str:
        return self.colorize(text, NeonColors.NEON_YELLOW + NeonColors.BOLD)

    def error(self, text: str) -> str:
        return self.colorize(text, NeonColors.NEON_RED + NeonColors.BOLD)

    def info(self, text: str) -> str:
        return self.colorize(text, NeonColors.NEON_CYAN)

    def highlight(self, text: str) -> str:
        return self.colorize(text, NeonColors.NEON_MAGENTA + NeonColors.BOLD)

    def title(self, text: str) -> str:
        return self.colorize(text, NeonColors.NEON_WHITE + NeonColors.BOLD)

    def stat_number(self, text: str) -> str:
        return self.colorize(text, NeonColors.NEON_PINK + NeonColors.BOLD)

    def ip_address(self, text: str) -> str:
        return self.colorize(text, NeonColors.NEON_GREEN)

    def asn_number(self, text: str) -> str:
        return self.colorize(text, NeonColors.NEON_CYAN)

    def country(self, text: str) -> str:
        return self.colorize(text, NeonColors.NEON_ORANGE + NeonColors.BOLD)

    def rainbow_text(self, text: str) -> str:
        if not self.enabled:
            return text

        colors = NeonColors.RAINBOW_COLORS
        result = [f"{colors[i % len(colors)]}{char}" for i, char in enumerate(text)]
        result.append(NeonColors.RESET)
        return ''.join(result)

    def neon_box(self, text: str, color: str = None) -> str:
        """Draw a box around multi-line text"""
        if color is None:
            color = NeonColors.NEON_CYAN

        lines = text.split('\n')
        max_width = max(len(line) for line in lines) if lines else 0

        top_line = "╔" + "═" * (max_width + 2) + "╗"
        bottom_line = "╚" + "═" * (max_width + 2) + "╝"

        result = [self.colorize(top_line, color + NeonColors.BOLD)]
        for line in lines:
            padded_line = f" {line.ljust(max_width)} "
            result.append(self.colorize("║", color + NeonColors.BOLD) +
                          self.colorize(padded_line, NeonColors.NEON_WHITE) +
                          self.colorize("║", color + NeonColors.BOLD))
        result.append(self.colorize(bottom_line, color + NeonColors.BOLD))
        return '\n'.join(result)


def create_ascii_banner() -> str:
    banner = r"""
   ___   _____ _   _       _
  / _ \ /  ___| \ | |     (_)
 / /_\ \\ `--.|  \| |_ __  _ _ __   __ _
 |  _  | `--. \ . ` | '_ \| | '_ \ / _` |
 | | | |/\__/ / |\  | |_) | | | | | (_| |
 \_| |_/\____/\_| \_/ .__/|_|_| |_|\__, |
                    | |             __/ |
                    |_|            |___/
      find a live host in every AS
    """
    return banner.strip('\n')


def create_separator(width: int = 60) -> str:
    return "━" * width


_color_scheme = None


def get_color_scheme(enabled: Optional[bool] = None) -> ColorScheme:
    """Get global color scheme instance"""
    global _color_scheme
    if _color_scheme is None or enabled is not None:
        _color_scheme = ColorScheme(enabled if enabled is not None else True)
    return _color_scheme
