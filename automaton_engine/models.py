"""
Data Model for the automaton engine.
Frozen Pydantic models: every operation returns a new value instead of mutating one.
"""

from enum import Enum
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Symbol value used for ε-transitions
EPSILON = None


class AutomatonKind(str, Enum):
    """Supported automaton kinds."""
    DFA = "DFA"
    NFA = "NFA"


class Transition(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_state: int
    to: FrozenSet[int] = Field(..., description="Destination states, a singleton for DFA")
    symbol: Optional[str] = Field(default=EPSILON, description="Input symbol, None for ε")

    @field_validator("to")
    @classmethod
    def to_not_empty(cls, v: FrozenSet[int]) -> FrozenSet[int]:
        if not v:
            raise ValueError("Transition must have at least one destination")
        return v

    @property
    def is_epsilon(self) -> bool:
        return self.symbol is EPSILON


class Automaton(BaseModel):
    """
    Root entity of the engine.

    Only shape is checked here. Cross-field invariants (valid references,
    determinism) are enforced by the builder and inspected by the validator,
    since model_copy(update=...) bypasses them.
    """
    model_config = ConfigDict(frozen=True)

    kind: AutomatonKind
    states: FrozenSet[int]
    alphabet: FrozenSet[str]
    transitions: Tuple[Transition, ...] = ()
    start_state: int = 0
    accept_states: FrozenSet[int] = frozenset()
    next_state_id: int = 1

    @field_validator("states")
    @classmethod
    def states_not_empty(cls, v: FrozenSet[int]) -> FrozenSet[int]:
        if not v:
            raise ValueError("Empty state list")
        if any(s < 0 for s in v):
            raise ValueError("State ids must be non-negative")
        return v

    @field_validator("alphabet")
    @classmethod
    def alphabet_not_empty(cls, v: FrozenSet[str]) -> FrozenSet[str]:
        if not v:
            raise ValueError("Alphabet cannot be empty")
        return v


class SimulationStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_state: int
    symbol_processed: Optional[str] = None
    remaining_input: str


class Simulation(BaseModel):
    """Execution snapshot of a DFA run. `current_states` generalizes to NFA."""
    model_config = ConfigDict(frozen=True)

    automaton: Automaton
    current_states: FrozenSet[int]
    remaining_input: str
    input: str
    steps: Tuple[SimulationStep, ...]


class ValidationReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
