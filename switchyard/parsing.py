"""
Parser: token sequence + option specs → bindings + positional parameters.

The parser is a small state machine driven by an explicit cursor and an
"open option" slot:

- an option token opens its option and looks at the following token to decide
  whether the option stays open (more values to take) or closes right away;
- an argument token is bound to the open option (after validation through its
  value type) or, with nothing open, becomes a positional parameter;
- the end-of-options marker closes whatever is open and turns every remaining
  token into a parameter, verbatim.

Saturation
- minimally saturated: bound count >= arity.minimum
- maximally saturated: bound count >= arity.maximum
An open option that is not maximally saturated always takes the next argument
token; parameters only start once it is full or closed by an option/marker.

An occurrence that closes without binding a value records the sentinel
(True): that is how flags, and options given without their optional value,
show up in the bindings. Counts are kept per option over the whole pass.

Results are fresh per call (Outcome); specs are never mutated.
"""
import logging as logmod
from collections import defaultdict
from types import MappingProxyType
from typing import NamedTuple

from .comparers import ORDINAL
from .faults import *
from .tokens import TokenKind
from .utils import ordinal, display

logging = logmod.getLogger(__name__)

SENTINEL = True


class Outcome(NamedTuple):
    """
    Result of one parse pass.

    - bindings: option → tuple of bound values (strings, plus SENTINEL for value-less occurrences)
    - matches: options in matching order; an option given twice appears twice
    - parameters: positional parameters in input order
    """
    bindings: MappingProxyType
    matches: tuple
    parameters: tuple


class Parser:
    """
    Token-walk parser over a fixed collection of option specs.

    Parameters
    - options: iterable of Option
    - comparer: Comparer used to resolve switches
    """

    def __init__(self, options, /, *, comparer=ORDINAL):
        self._options = tuple(options)
        self._comparer = comparer
        self._switches = {}
        for option in self._options:
            for switch in option.switches:
                self._switches.setdefault(comparer.normalize(switch), option)

    @property
    def options(self):
        return self._options

    def resolve(self, switch, /, *, index=None):
        """
        Return the option owning 'switch'; raise UnregisteredSwitchError otherwise.
        """
        try:
            return self._switches[self._comparer.normalize(switch)]
        except KeyError:
            position = "" if index is None else " at %s position" % ordinal(index + 1)
            raise UnregisteredSwitchError(
                "switch %r%s is not registered for any option" % (display(switch), position),
                title="unregistered switch",
                code=FaultCode.UNREGISTERED_SWITCH,
                hint="remove it or check the spelling against the registered options",
                docs=getdoc(FaultCode.UNREGISTERED_SWITCH),
                switch=switch,
                index=index,
            ) from None

    def parse(self, tokens, /):
        """
        Walk 'tokens' once and return an Outcome.

        Raises
        - UnregisteredSwitchError: an option token matches no registered option.
        - RequiredArgumentMissingError: an option closes below its minimum.
        - ArgumentValidityError: a value fails the option's value type.
        """
        tokens = tuple(tokens)
        bindings = defaultdict(list)
        counts = defaultdict(int)
        matches = []
        parameters = []

        def following(index):
            return tokens[index + 1].kind if index + 1 < len(tokens) else None

        def close(option, index, *, sentinel):
            if not option.arity.saturates(counts[option]):
                raise RequiredArgumentMissingError(
                    "option %r at %s position expects at least %d argument(s) but got %d" % (
                        display(tokens[index].value) if tokens[index].kind is TokenKind.OPTION else option.label,
                        ordinal(index + 1),
                        option.arity.minimum,
                        counts[option],
                    ),
                    title="required argument missing",
                    code=FaultCode.REQUIRED_ARGUMENT_MISSING,
                    hint="pass the missing value(s) right after %s" % option.label,
                    docs=getdoc(FaultCode.REQUIRED_ARGUMENT_MISSING),
                    option=option,
                    switch=option.switches[0],
                    index=index,
                )
            if sentinel:
                bindings[option].append(SENTINEL)
            matches.append(option)
            logging.debug("closed %s after %d value(s)", option.label, counts[option])

        open = None
        index = 0
        while index < len(tokens):
            token = tokens[index]
            match token.kind:
                case TokenKind.OPTION:
                    option = self.resolve(token.value, index=index)
                    match following(index):
                        case TokenKind.ARGUMENT if not option.arity.fills(counts[option]):
                            open = option
                        case TokenKind.ARGUMENT:
                            close(option, index, sentinel=True)
                            open = None
                        case _:
                            close(option, index, sentinel=True)
                            open = None
                case TokenKind.ARGUMENT if open is not None:
                    if not open.type.validate(token.value, ignore_case=self._comparer.ignore_case):
                        raise ArgumentValidityError(
                            "argument %r for option %r at %s position is not a valid %s" % (
                                token.value, open.label, ordinal(index + 1), open.type.metavar.lower()
                            ),
                            title="invalid argument",
                            code=FaultCode.ARGUMENT_VALIDITY,
                            hint="pass a value of type %s to %s" % (open.type.metavar.lower(), open.label),
                            docs=getdoc(FaultCode.ARGUMENT_VALIDITY),
                            option=open,
                            switch=open.switches[0],
                            value=token.value,
                            index=index,
                        )
                    bindings[open].append(token.value)
                    counts[open] += 1
                    match following(index):
                        case TokenKind.ARGUMENT if not open.arity.fills(counts[open]):
                            pass
                        case TokenKind.ARGUMENT:
                            matches.append(open)
                            open = None
                        case _:
                            close(open, index, sentinel=False)
                            open = None
                case TokenKind.ARGUMENT:
                    parameters.append(token.value)
                case TokenKind.MARKER:
                    parameters.extend(token.value for token in tokens[index + 1:])
                    break
            index += 1

        logging.debug(
            "parsed %d token(s): %d match(es), %d parameter(s)", len(tokens), len(matches), len(parameters)
        )
        return Outcome(
            MappingProxyType({option: tuple(values) for option, values in bindings.items()}),
            tuple(matches),
            tuple(parameters),
        )


def parse(tokens, options, /, *, comparer=ORDINAL):
    """
    Functional shortcut for Parser(options, comparer=comparer).parse(tokens).
    """
    return Parser(options, comparer=comparer).parse(tokens)


__all__ = (
    "SENTINEL",
    "Outcome",
    "Parser",
    "parse",
)
