"""TUI state dataclasses for observing button transitions."""

from __future__ import annotations

from dataclasses import dataclass

from asyncbutton.state import ButtonState


@dataclass
class TransitionCounts:
    """Number of transitions observed into each button state."""

    idle: int = 0
    loading: int = 0
    success: int = 0
    error: int = 0

    def record(self, state: ButtonState) -> None:
        """Count one transition into *state*."""
        setattr(self, state.kind, getattr(self, state.kind) + 1)

    def total(self) -> int:
        return self.idle + self.loading + self.success + self.error

    def summary(self) -> str:
        """One-line status text, e.g. ``idle 1 | loading 1 | success 0 | error 1``."""
        return (
            f"idle {self.idle} | loading {self.loading} | "
            f"success {self.success} | error {self.error}"
        )
