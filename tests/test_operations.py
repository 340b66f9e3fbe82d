from dfagraph import Automaton
from dfagraph.util.testing import all_words


def test_complete():
    a = Automaton()
    b = Automaton()
    for x in (a, b):
        x.add_symbol("a")
        x.add_edge("epsilon", "a", "a")

    assert a == b
    assert a.walk_edge("a", "a") is None

    a.complete()
    assert a != b
    assert a.walk_edge("a", "a").name == "junkyard"
    assert a.walk_edge("junkyard", "a").name == "junkyard"
    assert not a.is_terminal("junkyard")

    b.complete()
    a.complete()
    assert a == b


def test_complete_without_missing_edges_adds_no_sink():
    a = Automaton()
    a.add_edge("epsilon", "a", "epsilon")
    before = a.copy()
    a.complete()
    assert a == before
    assert "junkyard" not in a


def test_complete_sink_absorbs_every_symbol():
    a = Automaton()
    a.add_edge("epsilon", "a", "q")
    a.add_symbol("b")
    a.complete()
    for name in a.states:
        for symbol in "ab":
            assert a.walk_edge(name, symbol) is not None
    assert a.states["junkyard"].neighbours == {"a": "junkyard", "b": "junkyard"}


def test_complete_empty_alphabet():
    a = Automaton()
    a.complete()
    assert a == Automaton()


def test_complete_reuses_existing_sink():
    a = Automaton()
    a.add_edge("epsilon", "a", "junkyard")
    a.add_edge("junkyard", "a", "junkyard")
    a.add_symbol("b")
    a.complete()
    assert a.all_states() == {"epsilon", "junkyard"}
    assert a.states["junkyard"].neighbours == {"a": "junkyard", "b": "junkyard"}
    assert a.walk_edge("epsilon", "b").name == "junkyard"


def test_complete_does_not_take_over_accepting_junkyard():
    a = Automaton()
    a.add_edge("epsilon", "a", "junkyard")
    a.add_terminal_state("junkyard")
    a.add_symbol("b")
    before = a.copy()

    a.complete()
    assert a.states["junkyard"].neighbours == {"a": "junkyard1", "b": "junkyard1"}
    assert not a.is_terminal("junkyard1")
    assert a.walk_edge("junkyard1", "b").name == "junkyard1"
    for word in all_words("ab", 4):
        assert a.is_accepted(word) == before.is_accepted(word)

    after = a.copy()
    a.complete()
    assert a == after


def test_complete_does_not_take_over_junkyard_with_exits():
    a = Automaton()
    a.add_edge("epsilon", "a", "junkyard")
    a.add_edge("junkyard", "a", "end")
    a.add_terminal_state("end")
    a.add_symbol("b")
    before = a.copy()

    a.complete()
    assert a.walk_edge("junkyard", "b").name == "junkyard1"
    for word in all_words("ab", 4):
        assert a.is_accepted(word) == before.is_accepted(word)


def test_complete_after_removing_a_target():
    a = Automaton()
    a.add_edge("epsilon", "a", "q")
    a.remove_state("q")
    a.complete()
    assert a.walk_edge("epsilon", "a").name == "junkyard"
    assert not a.is_accepted("a")


def test_reduce_tolerates_dangling_edges():
    a = Automaton()
    a.add_edge("epsilon", "a", "q")
    a.add_edge("epsilon", "b", "r")
    a.add_edge("u", "a", "epsilon")
    a.remove_state("q")
    a.reduce_non_accessible_states()
    assert a.all_states() == {"epsilon", "r"}
    assert a.initial_state.neighbours == {"a": "q", "b": "r"}
    assert a.walk_edge("epsilon", "a") is None


def test_reduce_non_accessible_states():
    a = Automaton()
    b = Automaton()
    for x in (a, b):
        x.add_symbol("a")
        x.add_edge("a", "a", "epsilon")

    assert a == b
    assert a.semantic_equals(b)

    a.reduce_non_accessible_states()
    assert a != b
    assert a.semantic_equals(b)
    assert a.all_states() == {"epsilon"}

    b.reduce_non_accessible_states()
    a.reduce_non_accessible_states()
    assert a == b


def test_reduce_keeps_reachable_states():
    a = Automaton(
        ["p", "q", "r", "s"],
        "ab",
        "p",
        ["r"],
        [("p", "a", "q"), ("q", "b", "r"), ("s", "a", "p")],
    )
    copied = a.copy()
    copied.reduce_non_accessible_states()
    assert copied.all_states() == {"p", "q", "r"}
    assert a.semantic_equals(copied)


def test_reachable_from():
    a = Automaton(["p", "q", "r"], "a", "p", [], [("p", "a", "q"), ("q", "a", "q")])
    assert a.reachable_from("p") == {"p", "q"}
    assert a.reachable_from("p", inclusive=False) == {"q"}
    assert a.reachable_from("q", inclusive=False) == {"q"}
    assert a.reachable_from("r") == {"r"}


def test_accepting_behaviour():
    a = Automaton()
    a.add_symbol("a")
    a.add_edge("epsilon", "a", "a")
    a.add_terminal_state("a")

    assert not a.is_accepted("")
    assert a.is_accepted("a")
    assert not a.is_accepted("b")
    assert not a.is_accepted("aa")

    a.add_terminal_state("epsilon")
    assert a.is_accepted("")


def test_accepts_symbol_sequences():
    a = Automaton(["p", "q"], ["ab", "cd"], "p", ["q"], [("p", "ab", "q")])
    assert a.is_accepted(["ab"])
    assert not a.is_accepted("ab")


def test_empty_alphabet():
    a = Automaton()
    assert not a.is_accepted("")
    a.add_terminal_state(a.initial)
    assert a.is_accepted("")
    assert not a.is_accepted("a")


def test_complement():
    a = Automaton()
    a.add_symbol("a")
    a.add_edge("epsilon", "a", "a")
    a.add_terminal_state("a")

    assert a.is_terminal("a")
    assert not a.is_terminal("epsilon")

    a.complement()
    assert not a.is_terminal("a")
    assert a.is_terminal("epsilon")


def test_complement_language():
    a = Automaton(["p", "q"], "ab", "p", ["q"], [("p", "a", "q"), ("q", "b", "p")])
    b = a.copy()
    b.complete()
    b.complement()
    for word in all_words("ab", 5):
        assert b.is_accepted(word) == (not a.is_accepted(word))


def test_has_loop():
    a = Automaton()
    a.add_symbol("a")
    a.add_edge("epsilon", "a", "a")
    a.add_terminal_state("a")
    assert not a.has_loop()

    a.add_edge("a", "a", "a")
    assert a.has_loop()

    a.remove_edge("a", "a")
    a.add_edge("a", "a", "aa")
    a.add_edge("aa", "a", "a")
    assert a.has_loop()

    a.remove_terminal_state("a")
    assert not a.has_loop()


def test_self_loop_without_acceptance():
    a = Automaton()
    a.add_edge("epsilon", "a", "a")
    a.add_edge("a", "a", "a")
    a.add_terminal_state("a")
    assert a.has_loop()

    a.remove_terminal_state("a")
    assert not a.has_loop()


def test_shared_paths_are_not_loops():
    # Diamond: two paths meet at "d", no cycle
    a = Automaton(
        ["s", "b", "c", "d"],
        "xy",
        "s",
        ["d"],
        [("s", "x", "b"), ("s", "y", "c"), ("b", "x", "d"), ("c", "x", "d")],
    )
    assert not a.has_loop()


def test_dead_loop_before_acceptance_is_ignored():
    a = Automaton(
        ["s", "dead", "end"],
        "ab",
        "s",
        ["end"],
        [("s", "a", "dead"), ("dead", "a", "dead"), ("s", "b", "end")],
    )
    assert not a.has_loop()

    a.add_edge("dead", "b", "end")
    assert a.has_loop()


def test_unreachable_loop_is_ignored():
    a = Automaton()
    a.add_edge("u", "a", "u")
    a.add_terminal_state("u")
    assert not a.has_loop()


def test_long_chain_does_not_recurse():
    a = Automaton()
    previous = a.initial
    for i in range(5000):
        a.add_edge(previous, "a", f"s{i}")
        previous = f"s{i}"
    a.add_terminal_state(previous)
    assert not a.has_loop()

    a.add_edge(previous, "a", "s100")
    assert a.has_loop()


def test_generate_all():
    a = Automaton(["p", "q"], "ab", "p", ["q"], [("p", "a", "q"), ("q", "b", "q")])
    assert list(a.generate_all(3)) == ["a", "ab", "abb"]

    b = Automaton(["p"], "ab", "p", ["p"], [("p", "a", "p"), ("p", "b", "p")])
    assert list(b.generate_all(2)) == ["", "a", "b", "aa", "ab", "ba", "bb"]
