"""
Terminal UI — colored view of the companion's state.

Renders user lines, the detected emotion and trait snapshots. Trait
snapshots arrive as bus events, so the UI never queries the store itself.
"""

from __future__ import annotations

import sys
from typing import Any, Callable

from companion.core.bus import PERSONALITY_UPDATED, RELATIONSHIP_STAGE_CHANGED, EventBus
from companion.personality.aggregator import average, mood_category, relationship_stage

# ANSI color codes
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Foreground
    CYAN = "\033[36m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    WHITE = "\033[97m"

    # Bright variants
    BRIGHT_CYAN = "\033[96m"
    BRIGHT_MAGENTA = "\033[95m"


_MOOD_COLORS = {
    "speakingPositive": Colors.GREEN,
    "neutral": Colors.YELLOW,
    "speakingNegative": Colors.RED,
}


class TerminalUI:
    """Console observer for personality events."""

    def __init__(self, user_name: str = "You", character: str = "kimi"):
        self.user_name = user_name
        self.character = character
        self._disposers: list[Callable[[], None]] = []
        self._enable_colors()

    def _enable_colors(self) -> None:
        """Enable ANSI colors on Windows."""
        if sys.platform == "win32":
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)

    # ── bus wiring ───────────────────────────────────────────────────

    def attach(self, bus: EventBus) -> None:
        """Subscribe to the events this view renders."""
        self._disposers.append(bus.subscribe(PERSONALITY_UPDATED, self.print_traits))
        self._disposers.append(bus.subscribe(RELATIONSHIP_STAGE_CHANGED, self.print_stage_change))

    def detach(self) -> None:
        for dispose in self._disposers:
            dispose()
        self._disposers.clear()

    # ── output ───────────────────────────────────────────────────────

    def print_header(self) -> None:
        """Print the app header."""
        print()
        print(f"{Colors.BRIGHT_MAGENTA}{Colors.BOLD}{'═' * 60}{Colors.RESET}")
        print(f"  {Colors.BRIGHT_CYAN}Companion — chatting with {self.character}{Colors.RESET}")
        print(f"{Colors.BRIGHT_MAGENTA}{Colors.BOLD}{'═' * 60}{Colors.RESET}")
        print(f"  {Colors.DIM}Type a message and press Enter{Colors.RESET}")
        print(f"  {Colors.DIM}Type {Colors.WHITE}\"quit\"{Colors.DIM} or press {Colors.WHITE}Ctrl+C{Colors.DIM} to exit, "
              f"{Colors.WHITE}/diag{Colors.DIM} for bus diagnostics{Colors.RESET}")
        print()

    def print_emotion(self, emotion: str) -> None:
        print(f"  {Colors.DIM}emotion:{Colors.RESET} {Colors.BRIGHT_MAGENTA}{emotion}{Colors.RESET}")

    def print_traits(self, traits: Any) -> None:
        """Render one ``personality:updated`` payload."""
        if not isinstance(traits, dict):
            return
        mood = mood_category(traits)
        color = _MOOD_COLORS.get(mood, Colors.WHITE)
        cells = "  ".join(f"{name} {value}" for name, value in traits.items())
        print(f"  {Colors.DIM}traits:{Colors.RESET} {cells}")
        print(
            f"  {Colors.DIM}average:{Colors.RESET} {average(traits)}  "
            f"{Colors.DIM}mood:{Colors.RESET} {color}{mood}{Colors.RESET}  "
            f"{Colors.DIM}stage:{Colors.RESET} {relationship_stage(traits)}"
        )

    def print_stage_change(self, payload: Any) -> None:
        if not isinstance(payload, dict):
            return
        print(
            f"  {Colors.BRIGHT_CYAN}{Colors.BOLD}♥ {payload.get('character')}: "
            f"{payload.get('previous')} → {payload.get('current')}{Colors.RESET}"
        )

    def print_info(self, message: str) -> None:
        """Print an info message."""
        print(f"{Colors.DIM}{message}{Colors.RESET}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        print(f"\n{Colors.RED}{Colors.BOLD}[ERROR]{Colors.RESET} {Colors.RED}{message}{Colors.RESET}\n")

    def print_goodbye(self) -> None:
        """Print goodbye message."""
        print(f"\n{Colors.BRIGHT_MAGENTA}Bye bye~{Colors.RESET}\n")

    def print_interrupted(self) -> None:
        """Print interrupted message."""
        print(f"\n\n{Colors.YELLOW}Interrupted — shutting down...{Colors.RESET}\n")
