"""
Automaton validation predicates.

These check whether an automaton is READY for simulation. Automatons may be
incomplete while being built, so nothing here raises: every function is a
total predicate over possibly malformed values, including ones whose fields
were replaced directly instead of through the builder.
"""

from collections import Counter, deque
from typing import FrozenSet, List

from .models import EPSILON, Automaton, AutomatonKind, ValidationReport


def is_dfa(automaton: Automaton) -> bool:
    """
    A valid DFA has no ε-transitions, exactly one destination per transition
    and at most one transition per (state, symbol) pair.
    """
    if automaton.kind != AutomatonKind.DFA:
        return False

    if any(t.symbol is EPSILON for t in automaton.transitions):
        return False

    if any(len(t.to) != 1 for t in automaton.transitions):
        return False

    # Recount duplicates; the builder guard is not trusted here
    counts: Counter = Counter()
    for t in automaton.transitions:
        key = (t.from_state, t.symbol)
        counts[key] += 1
        if counts[key] >= 2:
            return False

    return True


def is_complete(automaton: Automaton) -> bool:
    """True if the DFA defines exactly one transition for every (state, symbol) pair."""
    if not is_dfa(automaton):
        return False

    counts = Counter((t.from_state, t.symbol) for t in automaton.transitions)
    for state in automaton.states:
        for symbol in automaton.alphabet:
            if counts[(state, symbol)] != 1:
                return False
    return True


def has_start_state(automaton: Automaton) -> bool:
    return automaton.start_state in automaton.states


def has_accept_states(automaton: Automaton) -> bool:
    return len(automaton.accept_states) > 0


def is_runnable(automaton: Automaton) -> bool:
    """Gate for simulation: a deterministic, complete DFA with a valid start state."""
    if automaton.kind != AutomatonKind.DFA:
        return False
    return has_start_state(automaton) and is_dfa(automaton) and is_complete(automaton)


def get_orphaned_states(automaton: Automaton) -> FrozenSet[int]:
    """
    States with no path from the start state.

    BFS over the transition multigraph, one edge per destination. If the start
    state is invalid every state counts as orphaned.
    """
    if not has_start_state(automaton):
        return frozenset(automaton.states)

    adjacency = {}
    for t in automaton.transitions:
        adjacency.setdefault(t.from_state, set()).update(t.to)

    reachable = {automaton.start_state}
    queue = deque([automaton.start_state])

    while queue:
        current = queue.popleft()
        for dest in adjacency.get(current, ()):
            if dest not in reachable:
                reachable.add(dest)
                queue.append(dest)

    return frozenset(automaton.states - reachable)


def get_validation_report(automaton: Automaton) -> ValidationReport:
    """
    Aggregate the predicates into errors (blocking) and warnings (advisory).
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not has_start_state(automaton):
        errors.append("No start state defined")

    deterministic = is_dfa(automaton)
    if not deterministic:
        errors.append("Not a valid DFA (check for ε-transitions or non-determinism)")
    elif not is_complete(automaton):
        errors.append("DFA is incomplete (missing transitions for some symbols)")

    if not has_accept_states(automaton):
        warnings.append("No accept states defined (will reject all inputs)")

    orphaned = get_orphaned_states(automaton)
    if orphaned:
        warnings.append(f"Unreachable states: {', '.join(str(s) for s in sorted(orphaned))}")

    return ValidationReport(valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
