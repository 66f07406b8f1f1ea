"""
Transition Types - FSM State Transition Definitions

Type definitions for navigation state machine transitions. Every navigation
operation on MultiPageForm reports what happened to the page pointer.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class StateMachineTransition(Enum):
    """
    What happened to the page pointer after a navigation call.
    Validation failures, gates and misuse warnings all leave it on HOLD.
    """

    HOLD = auto()  # The pointer remains on the current page.
    ADVANCE = auto()  # The pointer moved forward (linear or branched).
    BACK = auto()  # The pointer moved to the previous page.
    JUMP = auto()  # The pointer moved to an explicitly requested page.


@dataclass
class TransitionMeta:
    """
    Record of a committed page change, kept as the engine's last transition.
    """

    transition_type: StateMachineTransition
    from_page_id: Optional[str]
    to_page_id: str
