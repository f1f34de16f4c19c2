"""
Product Construction for runnable DFAs.
Intersection and union by exploring reachable state pairs, complement by
flipping accept states. Results are built through the builder.
"""

from collections import deque
from typing import Dict, Tuple

import structlog

from . import builder
from .errors import StructuralError
from .models import Automaton, AutomatonKind
from .validator import is_runnable

log = structlog.get_logger()


def _require_runnable(automaton: Automaton, name: str) -> None:
    if not is_runnable(automaton):
        raise StructuralError(f"{name} must be a runnable DFA")


def _combine(dfa1: Automaton, dfa2: Automaton, operation: str) -> Automaton:
    _require_runnable(dfa1, "Left operand")
    _require_runnable(dfa2, "Right operand")

    if dfa1.alphabet != dfa2.alphabet:
        raise StructuralError(
            f"Alphabet Mismatch: {sorted(dfa1.alphabet)} vs {sorted(dfa2.alphabet)}"
        )
    alphabet = sorted(dfa1.alphabet)

    def next_state(dfa: Automaton, state: int, symbol: str) -> int:
        return next(iter(builder.get_transition(dfa, state, symbol)[0].to))

    # State 0 of the new automaton stands for the start pair
    start_pair = (dfa1.start_state, dfa2.start_state)
    result = builder.create_automaton(AutomatonKind.DFA, alphabet)
    ids: Dict[Tuple[int, int], int] = {start_pair: result.start_state}
    queue = deque([start_pair])

    while queue:
        pair = queue.popleft()
        curr1, curr2 = pair

        accept1 = curr1 in dfa1.accept_states
        accept2 = curr2 in dfa2.accept_states
        is_accept = (accept1 and accept2) if operation == "AND" else (accept1 or accept2)
        if is_accept:
            result = builder.add_accept_state(result, ids[pair])

        for symbol in alphabet:
            target = (next_state(dfa1, curr1, symbol), next_state(dfa2, curr2, symbol))
            if target not in ids:
                result, ids[target] = builder.add_state(result)
                queue.append(target)
            result = builder.add_transition(result, ids[pair], {ids[target]}, symbol)

    log.info("product_built", operation=operation, states=len(result.states))
    return result


def intersect(dfa1: Automaton, dfa2: Automaton) -> Automaton:
    """DFA accepting the strings both operands accept."""
    return _combine(dfa1, dfa2, "AND")


def union(dfa1: Automaton, dfa2: Automaton) -> Automaton:
    """DFA accepting the strings either operand accepts."""
    return _combine(dfa1, dfa2, "OR")


def complement(dfa: Automaton) -> Automaton:
    """Same DFA with accepting and non-accepting states swapped."""
    _require_runnable(dfa, "Operand")
    return dfa.model_copy(update={"accept_states": dfa.states - dfa.accept_states})
