"""
Demo: build, validate and run a DFA accepting binary strings that begin
OR end (or both) with "01".

    python main.py            # run the built-in sample inputs
    python main.py 0110 1101  # run your own inputs
"""

import argparse
import json

from automaton_engine import (
    AutomatonKind,
    AutomatonError,
    add_accept_state,
    add_state,
    add_transition,
    create_automaton,
    get_execution_trace,
    get_validation_report,
    is_accepted,
    run_simulation,
    to_record,
)
from automaton_engine.logging_config import get_logger, setup_logging

log = get_logger(__name__)

STATE_NAMES = ["A", "B", "C", "D", "E", "F"]

SAMPLE_INPUTS = [
    ("01", True),
    ("010", True),
    ("001", True),
    ("10", False),
    ("1101", True),
    ("0111", True),
    ("00", False),
    ("11", False),
]


def build_begins_or_ends_with_01():
    dfa = create_automaton(AutomatonKind.DFA, {"0", "1"})
    ids = [dfa.start_state]
    for _ in STATE_NAMES[1:]:
        dfa, state_id = add_state(dfa)
        ids.append(state_id)
    A, B, C, D, E, F = ids

    # D is a trap accept state: once the prefix "01" is seen, always accept
    table = {
        A: {"0": B, "1": C},
        B: {"0": E, "1": D},
        C: {"0": E, "1": C},
        D: {"0": D, "1": D},
        E: {"0": E, "1": F},
        F: {"0": E, "1": C},
    }
    for src, row in table.items():
        for symbol, dest in row.items():
            dfa = add_transition(dfa, src, {dest}, symbol)

    dfa = add_accept_state(dfa, D)
    dfa = add_accept_state(dfa, F)
    return dfa


def main():
    parser = argparse.ArgumentParser(description="Automaton engine demo")
    parser.add_argument("inputs", nargs="*", help="Binary strings to run (default: built-in samples)")
    parser.add_argument("--dump", action="store_true", help="Print the automaton as a JSON record")
    args = parser.parse_args()

    setup_logging()
    dfa = build_begins_or_ends_with_01()

    def label(state_id: int) -> str:
        return STATE_NAMES[state_id]

    if args.dump:
        print(json.dumps(to_record(dfa).to_dict(), indent=2))

    report = get_validation_report(dfa)
    print("=== Validation Report ===")
    print(f"Valid: {report.valid}")
    print(f"Errors: {'; '.join(report.errors) or 'None'}")
    print(f"Warnings: {'; '.join(report.warnings) or 'None'}")

    cases = [(s, None) for s in args.inputs] if args.inputs else SAMPLE_INPUTS

    print("\n=== Traces ===")
    for input_str, expected in cases:
        try:
            simulation = run_simulation(dfa, input_str)
        except AutomatonError as e:
            log.warning("input_rejected", input=input_str, error=str(e))
            print(f'"{input_str}": {e}\n')
            continue

        marker = ""
        if expected is not None:
            marker = " (ok)" if is_accepted(simulation) == expected else " (MISMATCH)"
        print(f'Input: "{input_str}"{marker}')
        for line in get_execution_trace(simulation, label=label):
            print(f"  {line}")
        print()


if __name__ == "__main__":
    main()
