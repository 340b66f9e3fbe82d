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
Canonical labelling of automata, used to compare two automata up to the
names of their states.

Starting from the initial state, a breadth-first search that tries symbols in
sorted order reaches every state first along its shortest, then
lexicographically smallest, path. That path depends only on the shape of the
graph, so it can stand in for the state's name.
"""

from collections import deque

from cached_property import cached_property

from dfagraph.util import sorted_symbols


class CanonicalForm:
    """
    Read-only view of an automaton's reachable part with every state renamed
    to its canonical label, a tuple of symbols.

    The view computes its labels lazily and caches them, so it must not
    outlive a mutation of the automaton it was built from.
    """

    def __init__(self, automaton):
        self.automaton = automaton

    @cached_property
    def symbols(self):
        return sorted_symbols(self.automaton.alphabet)

    @cached_property
    def labels(self):
        """Maps each reachable state name to its canonical label."""

        automaton = self.automaton
        labels = {automaton.initial: ()}
        queue = deque([automaton.initial])
        while queue:
            name = queue.popleft()
            for symbol in self.symbols:
                dest = automaton.walk_edge(name, symbol)
                if dest is not None and dest.name not in labels:
                    labels[dest.name] = labels[name] + (symbol,)
                    queue.append(dest.name)
        return labels

    @cached_property
    def signature(self):
        """
        A frozenset with one ``(label, accepting, edges)`` entry per reachable
        state, where ``edges`` lists ``(symbol, target label)`` pairs.
        """

        automaton = self.automaton
        labels = self.labels
        entries = set()
        for name, label in labels.items():
            edges = []
            for symbol in self.symbols:
                dest = automaton.walk_edge(name, symbol)
                if dest is not None:
                    edges.append((symbol, labels[dest.name]))
            entries.add((label, automaton.is_terminal(name), tuple(edges)))
        return frozenset(entries)

    def __eq__(self, other):
        if not isinstance(other, CanonicalForm):
            return NotImplemented
        if self.automaton.alphabet != other.automaton.alphabet:
            return False
        return self.signature == other.signature

    __hash__ = None
