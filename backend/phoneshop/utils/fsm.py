from __future__ import annotations
"""Status graphs for the lifecycle entities.

Repair tickets, supplier orders and warranty claims each declare their graph
once as a module constant; services call ``assert_can_transition`` before
writing a new status. A state mapped to an empty set is terminal.

    REPAIRS_FSM = TransitionValidator({
        'Received': {'Diagnosed', 'Cancelled'},
        'Completed': set(),
    })
    REPAIRS_FSM.assert_can_transition(ticket.status, 'Diagnosed')
"""
from typing import Dict, Iterable, Set
from phoneshop.errors import InvalidTransitionError


class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    @property
    def states(self) -> Iterable[str]:
        return self.graph.keys()

    def allowed_from(self, current: str) -> Set[str]:
        return set(self.graph.get(current, ()))

    def is_terminal(self, current: str) -> bool:
        return not self.graph.get(current)

    def assert_can_transition(self, current: str, target: str) -> bool:
        if target not in self.graph.get(current, ()):
            raise InvalidTransitionError(f"Invalid {self.field_name} transition {current} -> {target}")
        return True


__all__ = ['TransitionValidator']
