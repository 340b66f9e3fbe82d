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
Product construction over two automata, and the language operations built on
it: intersection, union and concatenation.

A product state is a frozenset of *members*, ``(side, name)`` pairs where side
0 designates a state of the first automaton and side 1 a state of the second.
Tagging members by side keeps same-named states of the two automata apart.
"""

import itertools
from collections import deque

from loguru import logger

from dfagraph.automata.dfa import Automaton, name_of
from dfagraph.errors import UnknownStateError
from dfagraph.util import sorted_symbols


def _member_is_terminal(member, a, b):
    side, name = member
    return (a, b)[side].is_terminal(name)


def product(a, b, triggers, injected, accept, seed=None, base=1):
    """
    Builds the synchronised product of two automata.

    Both automata are first brought onto their joint alphabet and completed;
    this modifies them in place. A breadth-first search then explores product
    states. The successor of a product state on a symbol is the set of the
    successors of its members, each in its own automaton. Whenever a member of
    ``a`` lands on one of the ``triggers`` states, the ``injected`` state of
    ``b`` joins the successor.

    Each product state found gets a fresh integer name, counting from
    ``base``. Once the search is over, ``accept(members, a, b)`` is called once
    per product state to decide whether it is accepting.

    Args:
        a (Automaton): The first automaton.
        b (Automaton): The second automaton.
        triggers (iterable): States of ``a`` that pull ``injected`` in.
        injected: The state of ``b`` to inject.
        accept (callable): Receives the frozenset of members and both
            automata, returns True if the product state is accepting.
        seed (iterable): Members of the starting product state. By default
            this is the initial state of ``a``, plus ``injected`` if that
            initial state is a trigger.
        base (int): The name of the first product state.

    Returns:
        Automaton: The product automaton, complete over the joint alphabet.

    Raises:
        UnknownStateError: If ``injected`` is not a state of ``b``.
    """

    injected = name_of(injected)
    if injected not in b:
        raise UnknownStateError(f"Injected state {injected!r} is not a state")

    joint = a.alphabet | b.alphabet
    for symbol in joint:
        a.add_symbol(symbol)
        b.add_symbol(symbol)
    a.complete()
    b.complete()

    triggers = frozenset(name_of(t) for t in triggers)
    injected_member = (1, injected)
    if seed is None:
        seed = {(0, a.initial)}
        if a.initial in triggers:
            seed.add(injected_member)
    start = frozenset(seed)

    automata = (a, b)
    symbols = sorted_symbols(joint)
    counter = itertools.count(base)
    names = {start: str(next(counter))}
    result = Automaton([names[start]], symbols, names[start])

    queue = deque([start])
    while queue:
        current = queue.popleft()
        for symbol in symbols:
            successor = set()
            for side, name in current:
                dest = automata[side].walk_edge(name, symbol)
                successor.add((side, dest.name))
                if side == 0 and dest.name in triggers:
                    successor.add(injected_member)
            successor = frozenset(successor)

            if successor not in names:
                names[successor] = str(next(counter))
                queue.append(successor)
            result.add_edge(names[current], symbol, names[successor])

    for members, name in names.items():
        if accept(members, a, b):
            result.add_terminal_state(name)

    logger.debug("Product construction found {} states", len(names))
    return result


def intersection(a, b):
    """
    Returns an automaton accepting the words accepted by both ``a`` and ``b``.

    Both arguments are completed over their joint alphabet in place.
    """

    def accept(members, a, b):
        return all(_member_is_terminal(m, a, b) for m in members)

    seed = [(0, a.initial), (1, b.initial)]
    return product(a, b, (), b.initial, accept, seed=seed)


def union(a, b):
    """
    Returns an automaton accepting the words accepted by ``a`` or ``b``.

    Both arguments are completed over their joint alphabet in place.
    """

    def accept(members, a, b):
        return any(_member_is_terminal(m, a, b) for m in members)

    seed = [(0, a.initial), (1, b.initial)]
    return product(a, b, (), b.initial, accept, seed=seed)


def concatenation(a, b):
    """
    Returns an automaton accepting every word made of a word accepted by ``a``
    followed by a word accepted by ``b``.

    Every time the run through ``a`` reaches one of its accepting states, a
    fresh run of ``b`` is started from ``b``'s initial state. A product state
    accepts if one of its ``b`` runs is in an accepting state of ``b``.

    Both arguments are completed over their joint alphabet in place.
    """

    def accept(members, a, b):
        return any(side == 1 and b.is_terminal(name) for side, name in members)

    return product(a, b, frozenset(a.accepting_states), b.initial, accept)
