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
Minimisation of automata by partition refinement.
"""

from loguru import logger

from dfagraph.automata.dfa import Automaton
from dfagraph.util import sorted_symbols


def _index_of(parts):
    index = {}
    for i, part in enumerate(parts):
        for name in part:
            index[name] = i
    return index


def _split(parts, working, symbols):
    # Splits the first partition whose members disagree on the partition
    # reached by some symbol. Returns False once every partition is stable.
    index = _index_of(parts)
    for i, part in enumerate(parts):
        for symbol in symbols:
            targets = [index[working.walk_edge(name, symbol).name] for name in part]
            if len(set(targets)) == 1:
                continue

            groups = {}
            for name, target in zip(part, targets):
                groups.setdefault(target, []).append(name)
            parts.pop(i)
            parts.extend(groups.values())
            return True
    return False


def minimize(automaton):
    """
    Returns a new automaton recognising the same language as ``automaton``
    with as few states as possible.

    The argument is not modified: a copy is completed and stripped of
    unreachable states, then its states are split into accepting and
    non-accepting groups which are refined until, for every symbol, all the
    members of a group move into the same group. Each final group becomes one
    state, named by its position (``"0"``, ``"1"``...).

    Args:
        automaton (Automaton): The automaton to minimise.

    Returns:
        Automaton: The minimal automaton. It is complete.

    Example:
        >>> a = Automaton(["p", "q", "r"], "a", "p", ["q", "r"],
        ...               [("p", "a", "q"), ("q", "a", "r"), ("r", "a", "r")])
        >>> len(minimize(a))
        2
    """

    working = automaton.copy()
    working.complete()
    working.reduce_non_accessible_states()
    symbols = sorted_symbols(working.alphabet)

    accepting = [name for name in working.states if working.is_terminal(name)]
    rejecting = [name for name in working.states if not working.is_terminal(name)]
    parts = [part for part in (accepting, rejecting) if part]

    rounds = 0
    while _split(parts, working, symbols):
        rounds += 1
    logger.debug(
        "Refined {} states into {} partitions in {} splits",
        len(working),
        len(parts),
        rounds,
    )

    index = _index_of(parts)
    names = [str(i) for i in range(len(parts))]
    result = Automaton(names, symbols, names[index[working.initial]])
    for i, part in enumerate(parts):
        representative = part[0]
        if working.is_terminal(representative):
            result.add_terminal_state(names[i])
        for symbol in symbols:
            dest = working.walk_edge(representative, symbol)
            result.add_edge(names[i], symbol, names[index[dest.name]])
    return result
