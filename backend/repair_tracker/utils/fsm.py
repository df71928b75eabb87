"""Simple finite state machine utility for enforcing allowed status transitions.

Repair jobs accept any known status by default; the validator is only wired in when
ENFORCE_STATUS_TRANSITIONS is switched on.
Usage:
    from repair_tracker.utils.fsm import TransitionValidator
    JOB_FSM = TransitionValidator({
        'NEW_QUEUE': {'RECEIVED_AT_DROP'},
        'RECEIVED_AT_DROP': {'EVALUATING'},
        'COMPLETED': set(),
    })
    JOB_FSM.assert_can_transition(current_status, target_status)

Raises ValidationError if invalid.
"""
from __future__ import annotations
from typing import Dict, Set
from repair_tracker.errors import ValidationError

class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    def allowed_from(self, current: str) -> Set[str]:
        return set(self.graph.get(current, set()))

    def assert_can_transition(self, current: str, target: str):
        if target not in self.graph.get(current, set()):
            raise ValidationError.single(self.field_name, f"Invalid {self.field_name} transition {current} -> {target}")
        return True

__all__ = ['TransitionValidator']
