import sys
import os

import pytest

# Ensure the repository root (automaton_engine, api, main) is on sys.path
HERE = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(HERE, ".."))

if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from automaton_engine import (  # noqa: E402
    AutomatonKind,
    add_accept_state,
    add_state,
    add_transition,
    create_automaton,
)


def build_dfa(n_states, table, accept, alphabet=("0", "1")):
    """Build a DFA with states 0..n_states-1 from {state: {symbol: dest}}."""
    dfa = create_automaton(AutomatonKind.DFA, set(alphabet))
    for _ in range(n_states - 1):
        dfa, _ = add_state(dfa)
    for src, row in table.items():
        for symbol, dest in row.items():
            dfa = add_transition(dfa, src, {dest}, symbol)
    for state in accept:
        dfa = add_accept_state(dfa, state)
    return dfa


@pytest.fixture
def ends_with_01():
    # q0 start, q1 "last char 0", q2 "last two chars 01" (accept)
    return build_dfa(3, {
        0: {"0": 1, "1": 0},
        1: {"0": 1, "1": 2},
        2: {"0": 1, "1": 0},
    }, accept=[2])


@pytest.fixture
def divisible_by_3():
    # state r = value mod 3; new = (old * 2 + bit) mod 3
    return build_dfa(3, {
        r: {bit: (r * 2 + int(bit)) % 3 for bit in ("0", "1")} for r in range(3)
    }, accept=[0])


@pytest.fixture
def make_dfa():
    return build_dfa
