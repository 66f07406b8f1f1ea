from multipage_flow.execution.schemas.state_machine import (
    StateMachineTransition,
    TransitionMeta,
)

__all__ = [
    "StateMachineTransition",
    "TransitionMeta",
]
