"""Button lifecycle finite state machine.

Mirrors the self-driven edges of the button state machine. The controller
sends the matching event before applying each press, completion or revert;
an event that is not allowed from the current state means the transition
is stale and gets dropped.

The FSM is purely a validation tool: it holds no payload (errors live in
the ``ButtonState`` values) and has no on_enter_state callbacks. External
overrides bypass it by re-seating a fresh instance at the overridden state.
"""

from __future__ import annotations

from statemachine import State, StateMachine


class ButtonLifecycleSM(StateMachine):
    """Four-state lifecycle for a press-triggered action.

    States:
        idle    -- Nothing in flight; a press may start the action.
        loading -- Action in flight.
        success -- Action succeeded; waiting for the revert timer.
        error   -- Action failed; waiting for the revert timer.

    No state is final: idle is cyclic and disposal is handled by the
    controller, not the FSM.
    """

    idle = State("idle", initial=True, value="idle")
    loading = State("loading", value="loading")
    success = State("success", value="success")
    error = State("error", value="error")

    press = idle.to(loading)
    succeed = loading.to(success)
    fail = loading.to(error)
    settle = loading.to(idle)
    revert = success.to(idle) | error.to(idle)


def create_lifecycle(current_state: str = "idle") -> ButtonLifecycleSM:
    """Create an FSM instance at the given state.

    Args:
        current_state: One of 'idle', 'loading', 'success', 'error'.

    Returns:
        A ButtonLifecycleSM positioned at *current_state*.
    """
    return ButtonLifecycleSM(start_value=current_state)
