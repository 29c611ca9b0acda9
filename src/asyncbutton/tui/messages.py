"""Custom Textual Message types posted by async buttons.

Messages bubble from the button up through its ancestors, so any container
or the App can observe transitions with an ``on_button_state_changed``
handler. Handlers only observe; they cannot alter delivery or state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.message import Message

from asyncbutton.notifications import TransitionSource
from asyncbutton.state import ButtonState

if TYPE_CHECKING:
    from asyncbutton.tui.widget import AsyncButton


class ButtonStateChanged(Message):
    """Fired by an AsyncButton after every state transition."""

    def __init__(
        self,
        button: AsyncButton,
        state: ButtonState,
        previous: ButtonState,
        source: TransitionSource,
    ) -> None:
        self.button = button
        self.state = state
        self.previous = previous
        self.source = source
        super().__init__()

    @property
    def control(self) -> AsyncButton:
        """The button that changed, for ``@on(..., "#id")`` selectors."""
        return self.button
