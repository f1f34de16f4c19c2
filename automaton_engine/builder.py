"""
Automaton Builder
Pure, invariant-preserving constructors and mutators.

Every function takes an Automaton and returns a NEW Automaton; the input
value is never modified. All checks run before the new value is built, so a
failed call leaves nothing half-updated.

State ids are auto-incremented integers owned by the engine. Display labels
belong to the caller.
"""

from typing import Iterable, List, Optional, Tuple

import structlog

from .errors import StructuralError
from .models import EPSILON, Automaton, AutomatonKind, Transition

log = structlog.get_logger()


def _symbol_display(symbol: Optional[str]) -> str:
    return "ε" if symbol is EPSILON else f"'{symbol}'"


def create_automaton(kind: AutomatonKind, alphabet: Iterable[str]) -> Automaton:
    """
    Create a new automaton holding a single state (0), which is also the start state.

    Raises:
        StructuralError: if the alphabet is empty
    """
    alphabet = frozenset(alphabet)
    if not alphabet:
        raise StructuralError("Alphabet cannot be empty")

    automaton = Automaton(
        kind=AutomatonKind(kind),
        states=frozenset({0}),
        alphabet=alphabet,
        transitions=(),
        start_state=0,
        accept_states=frozenset(),
        next_state_id=1,
    )
    log.debug("automaton_created", kind=automaton.kind.value, alphabet=sorted(alphabet))
    return automaton


def add_state(automaton: Automaton) -> Tuple[Automaton, int]:
    """Issue the next state id. Returns the new automaton and the id."""
    state_id = automaton.next_state_id
    new_automaton = automaton.model_copy(update={
        "states": automaton.states | {state_id},
        "next_state_id": state_id + 1,
    })
    log.debug("state_added", state=state_id)
    return new_automaton, state_id


def remove_state(automaton: Automaton, state_id: int) -> Automaton:
    """
    Remove a state together with every transition into or out of it.

    When the start state is removed, the smallest remaining id becomes the
    new start state.
    """
    if state_id not in automaton.states:
        raise StructuralError(f"State {state_id} does not exist")
    if len(automaton.states) == 1:
        raise StructuralError("Cannot remove the last state")

    new_states = automaton.states - {state_id}
    new_transitions = tuple(
        t for t in automaton.transitions
        if t.from_state != state_id and state_id not in t.to
    )

    start_state = automaton.start_state
    if start_state == state_id:
        start_state = min(new_states)
        log.info("start_state_reassigned", removed=state_id, start_state=start_state)

    log.debug(
        "state_removed",
        state=state_id,
        dropped_transitions=len(automaton.transitions) - len(new_transitions),
    )
    return automaton.model_copy(update={
        "states": new_states,
        "accept_states": automaton.accept_states - {state_id},
        "transitions": new_transitions,
        "start_state": start_state,
    })


def add_transition(
    automaton: Automaton,
    from_state: int,
    to: Iterable[int],
    symbol: Optional[str],
) -> Automaton:
    """
    Append a transition. `symbol` is None (EPSILON) for an ε-transition.

    For DFA, `to` must hold exactly one state and ε is rejected. For both
    kinds a second transition on the same (from_state, symbol) is rejected.
    """
    to = frozenset(to)

    if from_state not in automaton.states:
        raise StructuralError(f"Source state {from_state} does not exist")

    for dest in sorted(to):
        if dest not in automaton.states:
            raise StructuralError(f"Destination state {dest} does not exist")

    if symbol is not EPSILON and symbol not in automaton.alphabet:
        raise StructuralError(f"Symbol '{symbol}' is not in the alphabet")

    if automaton.kind == AutomatonKind.DFA:
        if len(to) != 1:
            raise StructuralError("DFA transitions must have exactly one destination state")
        if symbol is EPSILON:
            raise StructuralError("DFA cannot have ε-transitions (epsilon transitions)")

    if not to:
        raise StructuralError("Transition must have at least one destination state")

    if get_transition(automaton, from_state, symbol):
        raise StructuralError(
            f"Transition from state {from_state} on symbol {_symbol_display(symbol)} already exists"
        )

    transition = Transition(from_state=from_state, to=to, symbol=symbol)
    log.debug("transition_added", from_state=from_state, to=sorted(to), symbol=symbol)
    return automaton.model_copy(update={
        "transitions": automaton.transitions + (transition,),
    })


def remove_transition(
    automaton: Automaton,
    from_state: int,
    to: Iterable[int],
    symbol: Optional[str],
) -> Automaton:
    """Drop transitions matching (from_state, symbol) with a set-equal destination. No-op if none match."""
    to = frozenset(to)
    new_transitions = tuple(
        t for t in automaton.transitions
        if not (t.from_state == from_state and t.symbol == symbol and t.to == to)
    )
    return automaton.model_copy(update={"transitions": new_transitions})


def set_start_state(automaton: Automaton, state_id: int) -> Automaton:
    if state_id not in automaton.states:
        raise StructuralError(f"State {state_id} does not exist")
    return automaton.model_copy(update={"start_state": state_id})


def add_accept_state(automaton: Automaton, state_id: int) -> Automaton:
    if state_id not in automaton.states:
        raise StructuralError(f"State {state_id} does not exist")
    if state_id in automaton.accept_states:
        raise StructuralError(f"State {state_id} is already an accept state")
    return automaton.model_copy(update={
        "accept_states": automaton.accept_states | {state_id},
    })


def remove_accept_state(automaton: Automaton, state_id: int) -> Automaton:
    if state_id not in automaton.states:
        raise StructuralError(f"State {state_id} does not exist")
    if state_id not in automaton.accept_states:
        raise StructuralError(f"State {state_id} is not an accept state")
    return automaton.model_copy(update={
        "accept_states": automaton.accept_states - {state_id},
    })


# --- Queries ---

def get_transitions_from(automaton: Automaton, state_id: int) -> List[Transition]:
    """All transitions leaving `state_id`, in insertion order."""
    return [t for t in automaton.transitions if t.from_state == state_id]


def get_transition(automaton: Automaton, state_id: int, symbol: Optional[str]) -> List[Transition]:
    """Transitions from `state_id` on `symbol`. At most one for a well-formed DFA."""
    return [
        t for t in automaton.transitions
        if t.from_state == state_id and t.symbol == symbol
    ]
