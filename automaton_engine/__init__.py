"""
Automaton engine: immutable DFA/NFA data model, builder, validator and simulator.
Centralized exports for all engine functionality.
"""

from .models import (
    EPSILON,
    AutomatonKind,
    Transition,
    Automaton,
    SimulationStep,
    Simulation,
    ValidationReport,
)

from .errors import AutomatonError, StructuralError, SimulationError

from .builder import (
    create_automaton,
    add_state,
    remove_state,
    add_transition,
    remove_transition,
    set_start_state,
    add_accept_state,
    remove_accept_state,
    get_transitions_from,
    get_transition,
)

from .validator import (
    is_dfa,
    is_complete,
    has_start_state,
    has_accept_states,
    is_runnable,
    get_orphaned_states,
    get_validation_report,
)

from .simulator import (
    create_simulation,
    step,
    is_finished,
    is_accepted,
    run_simulation,
    accepts,
    get_final_state,
    get_execution_trace,
    default_label,
)

from .schemas import AutomatonRecord, TransitionRecord, to_record, from_record

from .product import intersect, union, complement

__all__ = [
    # Models
    "EPSILON",
    "AutomatonKind",
    "Transition",
    "Automaton",
    "SimulationStep",
    "Simulation",
    "ValidationReport",
    # Errors
    "AutomatonError",
    "StructuralError",
    "SimulationError",
    # Builder
    "create_automaton",
    "add_state",
    "remove_state",
    "add_transition",
    "remove_transition",
    "set_start_state",
    "add_accept_state",
    "remove_accept_state",
    "get_transitions_from",
    "get_transition",
    # Validator
    "is_dfa",
    "is_complete",
    "has_start_state",
    "has_accept_states",
    "is_runnable",
    "get_orphaned_states",
    "get_validation_report",
    # Simulator
    "create_simulation",
    "step",
    "is_finished",
    "is_accepted",
    "run_simulation",
    "accepts",
    "get_final_state",
    "get_execution_trace",
    "default_label",
    # Exchange
    "AutomatonRecord",
    "TransitionRecord",
    "to_record",
    "from_record",
    # Product
    "intersect",
    "union",
    "complement",
]
