# Copyright 2014 Matt Chaput. All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY MATT CHAPUT ``AS IS'' AND ANY EXPRESS OR
# IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF
# MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO
# EVENT SHALL MATT CHAPUT OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA,
# OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING
# NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#
# The views and conclusions contained in the software and documentation are
# those of the authors and should not be interpreted as representing official
# policies, either expressed or implied, of Matt Chaput.

"""
This module contains the state graph at the core of DFAGraph: the ``State``
node and the ``Automaton`` that owns a registry of states, an alphabet, an
initial state and a set of accepting states.

States are addressed by name. An automaton's ``states`` dictionary is the
arena that owns every state, and every other reference (the initial state,
the accepting set, the target of an edge) is a name looked up in that arena.
A ``State`` object can still be handed to any method taking a state; it is
resolved to its name first.

Two construction contracts exist side by side:

* The constructor is strict. Every name and symbol it is given must be
  declared, otherwise :class:`dfagraph.errors.ValidationError` is raised and
  no automaton is built.
* The mutation methods (``add_state``, ``add_edge``...) are permissive. They
  register missing states and symbols instead of rejecting them.
"""

import itertools
from collections import deque

from loguru import logger

from dfagraph.automata.canonical import CanonicalForm
from dfagraph.errors import (
    InitialStateRemovalError,
    UnknownStateError,
    ValidationError,
)
from dfagraph.util import EPSILON_STATE, JUNKYARD_STATE, sorted_symbols


def name_of(ref):
    return ref.name if isinstance(ref, State) else ref


class State:
    """
    A named node of an automaton.

    Attributes:
        name (str): The name of the state, unique within an automaton.
        neighbours (dict): Maps each alphabet symbol to the name of the single
            state it leads to. A state knows nothing about the automaton it
            belongs to.

    Example:
        >>> s = State("q0", {"a": "q1"})
        >>> s.neighbours["a"]
        'q1'
    """

    def __init__(self, name, neighbours=None):
        self.name = name
        self.neighbours = {}
        if neighbours:
            for symbol, dest in neighbours.items():
                self.neighbours[symbol] = name_of(dest)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name!r}, {self.neighbours!r})"

    def __eq__(self, other):
        """
        Two states are equal if they have the same name and the same edges,
        edges being compared by the name of their target.
        """

        if not isinstance(other, State):
            return NotImplemented
        return self.name == other.name and self.neighbours == other.neighbours

    # States are mutable
    __hash__ = None

    def semantic_equals(self, other):
        """
        Returns True if this state equals ``other`` up to renaming itself and
        its neighbours.

        Both states must leave on the same symbols, and the two edge maps must
        induce the same grouping of symbols: two symbols lead to the same
        target from one state exactly when they lead to the same target from
        the other.

        Example:
            >>> State("p", {"a": "x", "b": "x"}).semantic_equals(
            ...     State("q", {"a": "y", "b": "y"}))
            True
            >>> State("p", {"a": "x", "b": "x"}).semantic_equals(
            ...     State("q", {"a": "y", "b": "z"}))
            False
        """

        if len(self.neighbours) != len(other.neighbours):
            return False

        symbols = sorted_symbols(self.neighbours)
        if symbols != sorted_symbols(other.neighbours):
            return False

        forward = {}
        backward = {}
        for symbol in symbols:
            mine = self.neighbours[symbol]
            theirs = other.neighbours[symbol]
            if mine in forward or theirs in backward:
                if forward.get(mine, theirs) != theirs:
                    return False
                if backward.get(theirs, mine) != mine:
                    return False
            else:
                forward[mine] = theirs
                backward[theirs] = mine
        return True


class Automaton:
    """
    Deterministic finite automaton over a finite alphabet.

    Attributes:
        states (dict): Maps each state name to its registered ``State``.
        alphabet (set): The input symbols.
        initial (str): Name of the initial state. Always registered.
        accepting_states (set): Names of the accepting states.

    Calling ``Automaton()`` with no arguments creates the empty automaton: a
    single non-accepting state named ``"epsilon"`` that is also the initial
    state. Any other call is validated strictly, see ``__init__``.
    """

    def __init__(
        self, states=None, alphabet=(), initial=None, accepting=(), edges=()
    ):
        """
        Builds an automaton from explicit lists.

        Args:
            states (iterable): State names.
            alphabet (iterable): Input symbols.
            initial (str): Name of the initial state.
            accepting (iterable): Names of the accepting states.
            edges (iterable): ``(source, symbol, target)`` triples.

        Raises:
            ValidationError: If the initial state or an accepting state is not
                among ``states``, or an edge uses an unknown state or symbol.

        Example:
            >>> a = Automaton(["p", "q"], "a", "p", ["q"], [("p", "a", "q")])
            >>> a.is_accepted("a")
            True
        """

        if states is None and initial is None:
            states = [EPSILON_STATE]
            initial = EPSILON_STATE

        names = [name_of(s) for s in states or ()]
        declared = set(names)
        initial = name_of(initial)
        alphabet = set(alphabet)
        accepting = [name_of(s) for s in accepting]
        edges = [(name_of(a), x, name_of(b)) for a, x, b in edges]

        if initial not in declared:
            raise ValidationError(f"Initial state {initial!r} is not a state")
        for name in accepting:
            if name not in declared:
                raise ValidationError(f"Accepting state {name!r} is not a state")
        for src, symbol, dest in edges:
            edge = (src, symbol, dest)
            if src not in declared:
                raise ValidationError(f"State {src!r} from edge {edge!r} is not a state")
            if symbol not in alphabet:
                raise ValidationError(
                    f"Symbol {symbol!r} from edge {edge!r} is not in the alphabet"
                )
            if dest not in declared:
                raise ValidationError(f"State {dest!r} from edge {edge!r} is not a state")

        self.states = {name: State(name) for name in names}
        self.alphabet = alphabet
        self.initial = initial
        self.accepting_states = set(accepting)
        for src, symbol, dest in edges:
            self.states[src].neighbours[symbol] = dest

    def __repr__(self):
        return "<%s %d states, %d symbols, initial=%r>" % (
            self.__class__.__name__,
            len(self.states),
            len(self.alphabet),
            self.initial,
        )

    def __len__(self):
        return len(self.states)

    def __contains__(self, ref):
        return name_of(ref) in self.states

    def __eq__(self, other):
        """
        Structural equality: same alphabet, same initial state name, same state
        names with the same edges, and same accepting state names.
        """

        if not isinstance(other, Automaton):
            return NotImplemented
        if self.alphabet != other.alphabet:
            return False
        if self.initial != other.initial:
            return False
        if self.states.keys() != other.states.keys():
            return False
        for name, state in self.states.items():
            if state != other.states[name]:
                return False
        return self.accepting_states == other.accepting_states

    __hash__ = None

    @property
    def initial_state(self):
        return self.states[self.initial]

    def all_states(self):
        return set(self.states)

    def _require(self, ref):
        name = name_of(ref)
        if name not in self.states:
            raise UnknownStateError(f"State {name!r} is not in the automaton")
        return name

    # Adding things

    def add_state(self, state):
        """
        Registers a state.

        A name that is already registered is left alone. A ``State`` object
        always replaces whatever was registered under its name; any target or
        symbol its edges mention that is not yet known is registered too.
        """

        if not isinstance(state, State):
            if state not in self.states:
                self.states[state] = State(state)
            return

        self.states[state.name] = state
        for symbol, dest in state.neighbours.items():
            self.alphabet.add(symbol)
            if dest not in self.states:
                self.states[dest] = State(dest)

    def add_terminal_state(self, state):
        name = name_of(state)
        if name not in self.states:
            self.add_state(state)
        self.accepting_states.add(name)

    def add_symbol(self, symbol):
        self.alphabet.add(symbol)

    def add_edge(self, src, symbol, dest):
        """
        Adds an edge from ``src`` to ``dest`` labelled ``symbol``, registering
        either state and the symbol if they are missing. An existing edge for
        the same source and symbol is replaced.

        Example:
            >>> a = Automaton()
            >>> a.add_edge("epsilon", "a", "q")
            >>> a.walk_edge("epsilon", "a").name
            'q'
        """

        for ref in (src, dest):
            if name_of(ref) not in self.states:
                self.add_state(ref)
        self.alphabet.add(symbol)
        self.states[name_of(src)].neighbours[symbol] = name_of(dest)

    # Removing things

    def remove_state(self, state):
        """
        Removes a state from the registry and the accepting set. Edges of other
        states pointing at it are left in place and behave as missing edges.

        Raises:
            UnknownStateError: If the state is not registered.
            InitialStateRemovalError: If the state is the initial state.
        """

        name = self._require(state)
        if name == self.initial:
            raise InitialStateRemovalError(
                f"Cannot remove the initial state {name!r}"
            )
        del self.states[name]
        self.accepting_states.discard(name)

    def remove_terminal_state(self, state):
        name = self._require(state)
        self.accepting_states.discard(name)

    def remove_edge(self, state, symbol):
        name = self._require(state)
        self.states[name].neighbours.pop(symbol, None)

    # Queries

    def is_terminal(self, state):
        return name_of(state) in self.accepting_states

    def walk_edge(self, state, symbol):
        """
        Returns the registered ``State`` reached from ``state`` by ``symbol``,
        or None if there is no such edge or its target is not registered.
        """

        if not isinstance(state, State):
            state = self.states.get(state)
            if state is None:
                return None
        dest = state.neighbours.get(symbol)
        if dest is None:
            return None
        return self.states.get(dest)

    def reachable_from(self, src, inclusive=True):
        """
        Returns the set of state names that can be reached from ``src``.

        Args:
            src: The state to start from.
            inclusive (bool): If True, ``src`` is always part of the result.
                Otherwise it is only included when it lies on a cycle.

        Raises:
            UnknownStateError: If ``src`` is not registered.
        """

        start = self._require(src)
        symbols = sorted_symbols(self.alphabet)

        reached = set()
        if inclusive:
            reached.add(start)

        seen = {start}
        queue = deque([start])
        while queue:
            name = queue.popleft()
            for symbol in symbols:
                dest = self.walk_edge(name, symbol)
                if dest is None:
                    continue
                reached.add(dest.name)
                if dest.name not in seen:
                    seen.add(dest.name)
                    queue.append(dest.name)
        return reached

    def is_accepted(self, word):
        """
        Returns True if the automaton accepts ``word``, a string or any other
        sequence of symbols. Symbols outside the alphabet and missing edges
        reject the word. The empty word is accepted iff the initial state is
        accepting.
        """

        state = self.initial_state
        for symbol in word:
            if symbol not in self.alphabet:
                return False
            state = self.walk_edge(state, symbol)
            if state is None:
                return False
        return state.name in self.accepting_states

    def generate_all(self, max_length):
        """
        Yields every accepted word of at most ``max_length`` symbols, shortest
        first and in alphabet order within a length. Words are built by string
        concatenation, so the alphabet must consist of strings.

        Example:
            >>> a = Automaton(["p", "q"], "ab", "p", ["q"],
            ...               [("p", "a", "q"), ("q", "b", "q")])
            >>> list(a.generate_all(3))
            ['a', 'ab', 'abb']
        """

        symbols = sorted_symbols(self.alphabet)
        frontier = [("", self.initial)]
        for length in range(max_length + 1):
            next_frontier = []
            for sofar, name in frontier:
                if name in self.accepting_states:
                    yield sofar
                if length == max_length:
                    continue
                for symbol in symbols:
                    dest = self.walk_edge(name, symbol)
                    if dest is not None:
                        next_frontier.append((sofar + symbol, dest.name))
            frontier = next_frontier

    # Equality

    def semantic_equals(self, other):
        """
        Returns True if this automaton equals ``other`` up to renaming states.

        Every reachable state is labelled with the shortest, then smallest,
        symbol sequence reaching it from the initial state, with the alphabet
        in sorted order. The automata are equal when they share an alphabet and
        agree on the labels, on which labels are accepting, and on where each
        labelled state's edges lead. Unreachable states are ignored.
        """

        return CanonicalForm(self) == CanonicalForm(other)

    # In-place transformations

    def _is_sink(self, name):
        # A non-accepting state whose edges can only lead back to itself
        if name in self.accepting_states:
            return False
        return all(
            dest == name or dest not in self.states
            for dest in self.states[name].neighbours.values()
        )

    def _sink_name(self):
        for n in itertools.count():
            name = JUNKYARD_STATE if n == 0 else f"{JUNKYARD_STATE}{n}"
            if name not in self.states or self._is_sink(name):
                return name

    def complete(self):
        """
        Gives every state an edge for every symbol of the alphabet.

        Missing edges are pointed at a non-accepting sink named ``"junkyard"``
        whose own edges all loop back to itself. The sink is only created if at
        least one edge is missing. A registered ``"junkyard"`` is reused only if
        it already behaves as a sink; otherwise the first free or reusable name
        among ``"junkyard1"``, ``"junkyard2"``... is taken. Running this twice
        changes nothing the second time.
        """

        symbols = sorted_symbols(self.alphabet)
        missing = [
            (state, symbol)
            for state in self.states.values()
            for symbol in symbols
            if self.walk_edge(state, symbol) is None
        ]
        if not missing:
            return

        sink_name = self._sink_name()
        created = sink_name not in self.states
        if created:
            self.states[sink_name] = State(sink_name)
            logger.debug("Created sink state {!r}", sink_name)

        for state, symbol in missing:
            state.neighbours[symbol] = sink_name
        if created:
            sink = self.states[sink_name]
            for symbol in symbols:
                sink.neighbours[symbol] = sink_name

        logger.debug("Completed {} missing edges", len(missing))

    def reduce_non_accessible_states(self):
        """
        Removes every state that cannot be reached from the initial state.
        """

        reachable = self.reachable_from(self.initial)
        unreachable = [name for name in self.states if name not in reachable]
        for name in unreachable:
            self.remove_state(name)
        if unreachable:
            logger.debug("Removed {} unreachable states", len(unreachable))

    def complement(self):
        """
        Swaps accepting and non-accepting states.

        This only complements the language when the automaton is complete;
        call :meth:`complete` first if it might not be.
        """

        self.accepting_states = set(self.states) - self.accepting_states

    # Loop detection

    def _successors(self, name, symbols):
        dests = []
        for symbol in symbols:
            dest = self.walk_edge(name, symbol)
            if dest is not None:
                dests.append(dest.name)
        return dests

    def _coreachable(self, symbols):
        # States from which some accepting state can be reached
        preds = {}
        for name in self.states:
            for dest in self._successors(name, symbols):
                preds.setdefault(dest, set()).add(name)

        live = {name for name in self.accepting_states if name in self.states}
        queue = deque(live)
        while queue:
            name = queue.popleft()
            for pred in preds.get(name, ()):
                if pred not in live:
                    live.add(pred)
                    queue.append(pred)
        return live

    def has_loop(self):
        """
        Returns True if a cycle reachable from the initial state can lead to an
        accepting state, that is, if the accepted language is infinite.

        Cycles are found with an iterative depth-first search: an edge back to
        a state that is still on the current search path closes a cycle. An
        edge to a state that was visited on an earlier, finished branch does
        not.
        """

        symbols = sorted_symbols(self.alphabet)
        live = self._coreachable(symbols)
        if not live:
            return False

        start = self.initial
        visited = {start}
        path = [start]
        on_path = {start}
        stack = [iter(self._successors(start, symbols))]
        while stack:
            dest = next(stack[-1], None)
            if dest is None:
                stack.pop()
                on_path.discard(path.pop())
                continue

            if dest in on_path:
                # Every state of the cycle reaches every other, so they are
                # either all live or all dead
                if dest in live:
                    return True
                continue

            if dest not in visited:
                visited.add(dest)
                path.append(dest)
                on_path.add(dest)
                stack.append(iter(self._successors(dest, symbols)))
        return False

    # Derived automata

    def copy(self):
        """
        Returns an independent copy of this automaton. States are copied, so
        mutating one automaton never affects the other.
        """

        other = self.__class__()
        other.states = {
            name: State(name, state.neighbours) for name, state in self.states.items()
        }
        other.alphabet = set(self.alphabet)
        other.initial = self.initial
        other.accepting_states = set(self.accepting_states)
        return other

    def minimize(self):
        """
        Returns the minimal automaton for this automaton's language. See
        :func:`dfagraph.automata.minimize.minimize`.
        """

        from dfagraph.automata.minimize import minimize

        return minimize(self)


# Useful functions


def semantic_equals(a, b):
    """
    Compares two states or two automata up to renaming of states.

    Raises:
        TypeError: If the arguments are not both states or both automata.
    """

    if isinstance(a, State) and isinstance(b, State):
        return a.semantic_equals(b)
    if isinstance(a, Automaton) and isinstance(b, Automaton):
        return a.semantic_equals(b)
    raise TypeError(
        f"Can't compare {type(a).__name__} with {type(b).__name__}"
    )


def renumber(automaton, base=0):
    """
    Returns a copy of the automaton with its states renamed to consecutive
    integers (as strings) starting at ``base``.

    Reachable states are numbered first, in breadth-first order over the
    sorted alphabet, then the remaining states in registry order. Edges whose
    target is not registered are dropped.

    Example:
        >>> a = Automaton(["p", "q"], "a", "p", ["q"], [("p", "a", "q")])
        >>> sorted(renumber(a, base=10).states)
        ['10', '11']
    """

    c = itertools.count(base)
    mapping = {}

    def remap(name):
        if name not in mapping:
            mapping[name] = str(next(c))
        return mapping[name]

    symbols = sorted_symbols(automaton.alphabet)
    queue = deque([automaton.initial])
    remap(automaton.initial)
    while queue:
        name = queue.popleft()
        for dest in automaton._successors(name, symbols):
            if dest not in mapping:
                remap(dest)
                queue.append(dest)
    for name in automaton.states:
        remap(name)

    edges = []
    for name, state in automaton.states.items():
        for symbol in symbols:
            dest = automaton.walk_edge(state, symbol)
            if dest is not None:
                edges.append((mapping[name], symbol, mapping[dest.name]))

    return Automaton(
        [mapping[name] for name in automaton.states],
        automaton.alphabet,
        mapping[automaton.initial],
        [mapping[name] for name in automaton.accepting_states],
        edges,
    )
