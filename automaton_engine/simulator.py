"""
DFA simulation engine.

A Simulation is either Ready (input left) or Finished (no input left).
step() is the only way to move between them and always returns a new value.
"""

from typing import Callable, List

import structlog

from .builder import get_transition
from .errors import SimulationError
from .models import Automaton, AutomatonKind, Simulation, SimulationStep
from .validator import is_runnable

log = structlog.get_logger()


def default_label(state_id: int) -> str:
    """Conventional display label for a state id, e.g. 3 -> "q3"."""
    return f"q{state_id}"


def create_simulation(automaton: Automaton, input: str) -> Simulation:
    """
    Start a simulation at the automaton's start state.

    Raises:
        SimulationError: for NFA, or if the automaton is not runnable
    """
    if automaton.kind == AutomatonKind.NFA:
        raise SimulationError("NFA simulation not yet supported")

    if not is_runnable(automaton):
        raise SimulationError("Automaton is not runnable (check with is_runnable())")

    initial = SimulationStep(
        current_state=automaton.start_state,
        symbol_processed=None,
        remaining_input=input,
    )
    return Simulation(
        automaton=automaton,
        current_states=frozenset({automaton.start_state}),
        remaining_input=input,
        input=input,
        steps=(initial,),
    )


def step(simulation: Simulation) -> Simulation:
    """Consume one symbol and move to the next state."""
    if is_finished(simulation):
        raise SimulationError("Simulation is already finished (no remaining input)")

    automaton = simulation.automaton
    symbol = simulation.remaining_input[0]
    remaining = simulation.remaining_input[1:]

    # DFA: single current state
    current_state = next(iter(simulation.current_states))

    if symbol not in automaton.alphabet:
        raise SimulationError(f"Symbol '{symbol}' is not in the alphabet")

    transitions = get_transition(automaton, current_state, symbol)
    if not transitions:
        raise SimulationError(f"No transition from state {current_state} on symbol '{symbol}'")

    next_state = next(iter(transitions[0].to))

    record = SimulationStep(
        current_state=next_state,
        symbol_processed=symbol,
        remaining_input=remaining,
    )
    return simulation.model_copy(update={
        "current_states": frozenset({next_state}),
        "remaining_input": remaining,
        "steps": simulation.steps + (record,),
    })


def is_finished(simulation: Simulation) -> bool:
    return len(simulation.remaining_input) == 0


def is_accepted(simulation: Simulation) -> bool:
    """True only once finished and some current state is accepting."""
    if not is_finished(simulation):
        return False
    return not simulation.current_states.isdisjoint(simulation.automaton.accept_states)


def run_simulation(automaton: Automaton, input: str) -> Simulation:
    simulation = create_simulation(automaton, input)
    while not is_finished(simulation):
        simulation = step(simulation)

    log.debug(
        "simulation_finished",
        input=input,
        steps=len(simulation.steps) - 1,
        accepted=is_accepted(simulation),
    )
    return simulation


def accepts(automaton: Automaton, input: str) -> bool:
    return is_accepted(run_simulation(automaton, input))


def get_final_state(automaton: Automaton, input: str) -> int:
    simulation = run_simulation(automaton, input)
    return next(iter(simulation.current_states))


def get_execution_trace(
    simulation: Simulation,
    label: Callable[[int], str] = default_label,
) -> List[str]:
    """
    Human-readable trace, one line per step:

        Start: q0 | Remaining: "101"
        Read '1': q0 → q1 | Remaining: "01"
        ...
        Result: REJECTED

    The result line only appears once the simulation is finished.
    """
    trace = []
    previous = None
    for record in simulation.steps:
        if record.symbol_processed is None:
            trace.append(f'Start: {label(record.current_state)} | Remaining: "{record.remaining_input}"')
        else:
            trace.append(
                f"Read '{record.symbol_processed}': {label(previous)} → {label(record.current_state)}"
                f' | Remaining: "{record.remaining_input}"'
            )
        previous = record.current_state

    if is_finished(simulation):
        trace.append(f"Result: {'ACCEPTED' if is_accepted(simulation) else 'REJECTED'}")

    return trace
