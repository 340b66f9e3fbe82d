from dfagraph import Automaton, minimize, renumber
from dfagraph.util.testing import all_words


def a_plus():
    a = Automaton()
    a.add_symbol("a")
    a.add_edge("epsilon", "a", "a")
    a.add_terminal_state("a")
    a.add_edge("a", "a", "a")
    return a


def test_minimizing_automata():
    a = a_plus()
    b = a_plus()

    a = minimize(a)
    assert a.semantic_equals(b)

    a.add_terminal_state(a.initial)
    a = minimize(a)
    assert not a.semantic_equals(b)
    assert len(a) == 1


def test_minimize_does_not_modify_argument():
    a = Automaton()
    a.add_edge("epsilon", "a", "q")
    a.add_edge("u", "b", "q")
    before = a.copy()
    minimize(a)
    assert a == before


def test_minimize_merges_equivalent_states():
    # Words over {a, b} ending in "b"
    a = Automaton(
        ["s", "p", "q", "r"],
        "ab",
        "s",
        ["q", "r"],
        [
            ("s", "a", "p"),
            ("s", "b", "q"),
            ("p", "a", "p"),
            ("p", "b", "r"),
            ("q", "a", "p"),
            ("q", "b", "r"),
            ("r", "a", "s"),
            ("r", "b", "q"),
        ],
    )
    m = minimize(a)
    assert len(m) == 2
    for word in all_words("ab", 6):
        assert m.is_accepted(word) == a.is_accepted(word) == word.endswith("b")


def test_minimize_preserves_language():
    a = Automaton(
        ["0", "1", "2", "3", "4"],
        "xy",
        "0",
        ["2", "4"],
        [
            ("0", "x", "1"),
            ("0", "y", "3"),
            ("1", "x", "2"),
            ("3", "x", "4"),
            ("2", "y", "2"),
            ("4", "y", "4"),
        ],
    )
    m = minimize(a)
    # 0, {1, 3}, {2, 4} and the sink
    assert len(m) == 4
    for word in all_words("xy", 6):
        assert m.is_accepted(word) == a.is_accepted(word)


def test_minimize_is_idempotent():
    a = Automaton(
        ["p", "q", "r"],
        "ab",
        "p",
        ["r"],
        [("p", "a", "q"), ("q", "a", "r"), ("q", "b", "p"), ("r", "b", "r")],
    )
    once = minimize(a)
    twice = minimize(once)
    assert once.semantic_equals(twice)
    assert len(once) == len(twice)


def test_minimize_is_canonical():
    a = Automaton(
        ["p", "q", "r"],
        "ab",
        "p",
        ["r"],
        [("p", "a", "q"), ("q", "a", "r"), ("r", "a", "r"), ("r", "b", "r")],
    )
    b = renumber(a, base=5)
    assert a.semantic_equals(b)

    ma = minimize(a)
    mb = minimize(b)
    assert ma.semantic_equals(mb)
    assert len(ma) == len(mb)


def test_minimize_empty_language():
    a = Automaton()
    a.add_edge("epsilon", "a", "q")
    m = minimize(a)
    assert len(m) == 1
    assert not any(m.is_accepted(word) for word in all_words("a", 4))


def test_minimize_empty_alphabet():
    a = Automaton()
    a.add_state("unreachable")
    m = minimize(a)
    assert len(m) == 1
    assert not m.alphabet
    assert not m.is_accepted("")


def test_minimize_with_accepting_junkyard_state():
    a = Automaton()
    a.add_edge("epsilon", "a", "junkyard")
    a.add_terminal_state("junkyard")
    a.add_symbol("b")
    m = minimize(a)
    for word in all_words("ab", 4):
        assert m.is_accepted(word) == (word == "a")


def test_minimize_method():
    a = a_plus()
    assert a.minimize().semantic_equals(minimize(a))
