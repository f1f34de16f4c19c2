import pytest

from automaton_engine import (
    EPSILON,
    AutomatonKind,
    StructuralError,
    add_accept_state,
    add_state,
    add_transition,
    create_automaton,
    get_transition,
    get_transitions_from,
    remove_accept_state,
    remove_state,
    remove_transition,
    set_start_state,
)


def new_dfa(n_states=1):
    dfa = create_automaton(AutomatonKind.DFA, {"0", "1"})
    for _ in range(n_states - 1):
        dfa, _ = add_state(dfa)
    return dfa


# --- 1. create_automaton ---
def test_create_dfa_defaults():
    dfa = create_automaton(AutomatonKind.DFA, {"0", "1"})
    assert dfa.kind == AutomatonKind.DFA
    assert dfa.states == {0}
    assert dfa.alphabet == {"0", "1"}
    assert dfa.start_state == 0
    assert dfa.next_state_id == 1
    assert dfa.transitions == ()
    assert dfa.accept_states == set()


def test_create_accepts_string_kind():
    nfa = create_automaton("NFA", ["a", "b", "a"])
    assert nfa.kind == AutomatonKind.NFA
    assert nfa.alphabet == {"a", "b"}


def test_create_empty_alphabet_fails():
    with pytest.raises(StructuralError, match="Alphabet cannot be empty"):
        create_automaton(AutomatonKind.DFA, set())


# --- 2. add_state / remove_state ---
def test_add_state_issues_sequential_ids():
    dfa = new_dfa()
    dfa1, q1 = add_state(dfa)
    dfa2, q2 = add_state(dfa1)
    assert (q1, q2) == (1, 2)
    assert dfa2.states == {0, 1, 2}
    assert dfa2.next_state_id == 3
    # Original value untouched
    assert dfa.states == {0}
    assert dfa.next_state_id == 1


def test_ids_never_reissued_after_removal():
    dfa = new_dfa()
    issued = []
    for _ in range(3):
        dfa, state_id = add_state(dfa)
        issued.append(state_id)
    dfa = remove_state(dfa, issued[-1])
    dfa = remove_state(dfa, issued[0])
    dfa, again = add_state(dfa)
    assert again not in issued
    assert again == 4
    assert dfa.next_state_id == 5


def test_remove_missing_state_fails():
    with pytest.raises(StructuralError, match="State 7 does not exist"):
        remove_state(new_dfa(2), 7)


def test_remove_last_state_fails():
    with pytest.raises(StructuralError, match="Cannot remove the last state"):
        remove_state(new_dfa(), 0)


def test_remove_start_state_reassigns_to_other_state():
    dfa = new_dfa(2)
    dfa = remove_state(dfa, 0)
    assert dfa.states == {1}
    assert dfa.start_state == 1


def test_remove_start_state_picks_smallest_remaining():
    dfa = new_dfa(4)
    dfa = set_start_state(dfa, 2)
    dfa = remove_state(dfa, 2)
    assert dfa.start_state == 0


def test_remove_state_drops_related_transitions_and_accept():
    dfa = new_dfa(3)
    dfa = add_transition(dfa, 0, {1}, "0")
    dfa = add_transition(dfa, 1, {2}, "0")
    dfa = add_transition(dfa, 2, {0}, "1")
    dfa = add_transition(dfa, 0, {0}, "1")
    dfa = add_accept_state(dfa, 1)

    result = remove_state(dfa, 1)

    assert result.accept_states == set()
    assert [(t.from_state, set(t.to), t.symbol) for t in result.transitions] == [
        (2, {0}, "1"),
        (0, {0}, "1"),
    ]


def test_remove_state_drops_nfa_transition_containing_state():
    nfa = create_automaton(AutomatonKind.NFA, {"a"})
    nfa, q1 = add_state(nfa)
    nfa, q2 = add_state(nfa)
    nfa = add_transition(nfa, 0, {q1, q2}, "a")
    nfa = remove_state(nfa, q2)
    assert nfa.transitions == ()


# --- 3. add_transition ---
def test_add_transition_visible_via_get_transition():
    dfa = add_transition(new_dfa(2), 0, {1}, "0")
    found = get_transition(dfa, 0, "0")
    assert len(found) == 1
    assert found[0].to == {1}
    assert get_transition(dfa, 0, "1") == []


def test_add_transition_does_not_mutate_input():
    dfa = new_dfa(2)
    add_transition(dfa, 0, {1}, "0")
    assert dfa.transitions == ()


@pytest.mark.parametrize("src, dest, message", [
    (5, 0, "Source state 5 does not exist"),
    (0, 9, "Destination state 9 does not exist"),
])
def test_add_transition_invalid_states(src, dest, message):
    with pytest.raises(StructuralError, match=message):
        add_transition(new_dfa(2), src, {dest}, "0")


def test_add_transition_symbol_not_in_alphabet():
    with pytest.raises(StructuralError, match="Symbol 'x' is not in the alphabet"):
        add_transition(new_dfa(2), 0, {1}, "x")


def test_dfa_rejects_multiple_destinations():
    with pytest.raises(StructuralError, match="exactly one destination"):
        add_transition(new_dfa(3), 0, {1, 2}, "0")


def test_dfa_rejects_empty_destination():
    with pytest.raises(StructuralError, match="exactly one destination"):
        add_transition(new_dfa(2), 0, set(), "0")


def test_dfa_rejects_epsilon():
    with pytest.raises(StructuralError, match="ε-transitions"):
        add_transition(new_dfa(2), 0, {1}, EPSILON)


def test_duplicate_from_symbol_rejected():
    dfa = add_transition(new_dfa(3), 0, {1}, "0")
    with pytest.raises(StructuralError, match="Transition from state 0 on symbol '0' already exists"):
        add_transition(dfa, 0, {2}, "0")


def test_nfa_allows_multiple_destinations_and_epsilon():
    nfa = create_automaton(AutomatonKind.NFA, {"a"})
    nfa, q1 = add_state(nfa)
    nfa, q2 = add_state(nfa)
    nfa = add_transition(nfa, 0, {q1, q2}, "a")
    nfa = add_transition(nfa, 0, {q2}, EPSILON)
    assert len(nfa.transitions) == 2
    assert nfa.transitions[1].is_epsilon


def test_nfa_duplicate_epsilon_rejected():
    nfa = create_automaton(AutomatonKind.NFA, {"a"})
    nfa, q1 = add_state(nfa)
    nfa = add_transition(nfa, 0, {q1}, EPSILON)
    with pytest.raises(StructuralError, match="on symbol ε already exists"):
        add_transition(nfa, 0, {0}, EPSILON)


# --- 4. remove_transition ---
def test_remove_transition_matches_set_equal_destination():
    nfa = create_automaton(AutomatonKind.NFA, {"a"})
    nfa, q1 = add_state(nfa)
    nfa, q2 = add_state(nfa)
    nfa = add_transition(nfa, 0, {q1, q2}, "a")

    assert len(remove_transition(nfa, 0, {q1}, "a").transitions) == 1
    assert remove_transition(nfa, 0, [q2, q1], "a").transitions == ()


def test_remove_transition_no_match_is_noop():
    dfa = add_transition(new_dfa(2), 0, {1}, "0")
    assert remove_transition(dfa, 1, {0}, "0").transitions == dfa.transitions


# --- 5. start / accept states ---
def test_set_start_state():
    dfa = set_start_state(new_dfa(2), 1)
    assert dfa.start_state == 1
    with pytest.raises(StructuralError, match="State 4 does not exist"):
        set_start_state(dfa, 4)


def test_accept_state_add_and_remove():
    dfa = add_accept_state(new_dfa(2), 1)
    assert dfa.accept_states == {1}

    with pytest.raises(StructuralError, match="already an accept state"):
        add_accept_state(dfa, 1)

    dfa = remove_accept_state(dfa, 1)
    assert dfa.accept_states == set()

    with pytest.raises(StructuralError, match="is not an accept state"):
        remove_accept_state(dfa, 1)

    with pytest.raises(StructuralError, match="does not exist"):
        add_accept_state(dfa, 3)


# --- 6. queries ---
def test_get_transitions_from_keeps_order():
    dfa = new_dfa(2)
    dfa = add_transition(dfa, 0, {1}, "1")
    dfa = add_transition(dfa, 1, {0}, "0")
    dfa = add_transition(dfa, 0, {0}, "0")
    assert [t.symbol for t in get_transitions_from(dfa, 0)] == ["1", "0"]
    assert get_transitions_from(dfa, 5) == []
