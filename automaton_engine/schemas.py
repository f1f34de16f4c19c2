"""
Exchange Schema for the automaton engine.
Array-based record used by loaders/serializers and the HTTP API.

Records are plain lists, so converting one back into an Automaton
deduplicates them and replays the builder operations, which keeps every
invariant check in place.
"""

from typing import List, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

from . import builder
from .errors import StructuralError
from .models import Automaton, AutomatonKind

log = structlog.get_logger()


class TransitionRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_state: int = Field(..., alias="from", ge=0)
    to: List[int] = Field(..., min_length=1)
    symbol: Optional[str] = Field(default=None, description="None for ε-transitions")


class AutomatonRecord(BaseModel):
    """
    Serializable form of an Automaton.
    Field names use camelCase aliases on the wire.
    """
    model_config = ConfigDict(populate_by_name=True)

    kind: AutomatonKind
    states: List[int] = Field(..., min_length=1)
    alphabet: List[str] = Field(..., min_length=1)
    transitions: List[TransitionRecord] = Field(default_factory=list)
    start_state: int = Field(..., alias="startState")
    accept_states: List[int] = Field(default_factory=list, alias="acceptStates")
    next_state_id: int = Field(..., alias="nextStateId")

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dictionary with wire field names."""
        return self.model_dump(mode="json", by_alias=True)


def to_record(automaton: Automaton) -> AutomatonRecord:
    return AutomatonRecord(
        kind=automaton.kind,
        states=sorted(automaton.states),
        alphabet=sorted(automaton.alphabet),
        transitions=[
            TransitionRecord(from_state=t.from_state, to=sorted(t.to), symbol=t.symbol)
            for t in automaton.transitions
        ],
        start_state=automaton.start_state,
        accept_states=sorted(automaton.accept_states),
        next_state_id=automaton.next_state_id,
    )


def from_record(record: AutomatonRecord) -> Automaton:
    """
    Rebuild an Automaton through the builder.

    The deduplicated state set and the id counter are validated and installed
    together; transitions, start state and accept states are then replayed
    through the builder so the usual reference checks apply to each of them.
    Cost grows with the size of the record, not with the size of the ids.

    Raises:
        StructuralError: on any invariant violation in the record
    """
    states = sorted(set(record.states))
    if states[0] < 0:
        raise StructuralError("State ids must be non-negative")
    if record.next_state_id <= states[-1]:
        raise StructuralError(
            f"nextStateId {record.next_state_id} must be greater than every state id"
        )

    # The state set is fully checked above, so it is installed in one copy
    automaton = builder.create_automaton(record.kind, record.alphabet)
    automaton = automaton.model_copy(update={
        "states": frozenset(states),
        "start_state": states[0],
        "next_state_id": record.next_state_id,
    })

    for t in record.transitions:
        automaton = builder.add_transition(automaton, t.from_state, t.to, t.symbol)

    automaton = builder.set_start_state(automaton, record.start_state)

    for state_id in sorted(set(record.accept_states)):
        automaton = builder.add_accept_state(automaton, state_id)

    log.debug("record_loaded", states=len(states), transitions=len(record.transitions))
    return automaton
