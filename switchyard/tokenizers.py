"""
Tokenizers: raw strings + arity map → ordered token sequence.

A tokenizer strategy is any callable

    strategy(inputs, arities, /, *, comparer) -> tuple[Token, ...]

where `arities` maps every registered bare switch to its Arity. Strategies are
selected by name through TOKENIZERS (or passed directly) and never fail: any
unrecognised shape degrades to an argument token, validation is left to the parser.

Strategies
- smart: arity-aware. After an option whose minimum is above zero, the next
  `minimum` strings are arguments no matter how they look ("-o -x" binds "-x"
  to -o when -o needs a value).
- basic: arity-unaware. Every prefixed string is an option token.

Both share prepare():
- "--name=value" → "--name", "value" (split on the first '=')
- "-abc"         → "-a", "-b", "-c"
- "--" and everything after it are left untouched.
"""
import logging as logmod
from enum import Enum
from types import MappingProxyType

from .comparers import ORDINAL
from .tokens import Token

logging = logmod.getLogger(__name__)

SHORT_PREFIX = "-"
LONG_PREFIX = "--"
MARKER = "--"
MAPPING_SYMBOL = "="


class Treatment(Enum):
    """
    How the string currently being read is treated by the smart tokenizer.
    """
    NONE = "none"
    OPTION_ARGUMENT = "option-argument"
    TRAILING_ARGUMENT = "trailing-argument"


def _short(text, comparer):
    return (
        comparer.startswith(text, SHORT_PREFIX)
        and not comparer.startswith(text, LONG_PREFIX)
        and len(text) > len(SHORT_PREFIX)
    )


def prepare(inputs, /, *, comparer=ORDINAL):
    """
    Split inline values and explode clustered short switches.

    Returns a list of strings. Strings following the end-of-options marker are
    copied verbatim, the marker included.
    """
    prepared = []
    iterator = iter(inputs)

    for input in iterator:
        if not isinstance(input, str):
            raise TypeError("tokenizer inputs must be strings")
        if comparer(input, MARKER):
            prepared.append(input)
            prepared.extend(iterator)
            break

        head, separator, tail = input.partition(MAPPING_SYMBOL)
        for text in (head, tail) if separator else (head,):
            if _short(text, comparer):
                prepared.extend(SHORT_PREFIX + char for char in text[len(SHORT_PREFIX):])
            else:
                prepared.append(text)

    return prepared


def smart(inputs, arities, /, *, comparer=ORDINAL):
    """
    Arity-aware tokenizer.

    Walks the prepared strings keeping a treatment mode and, for the option
    currently consuming values, its (count, arity) context:
    - TRAILING_ARGUMENT (after "--"): everything is an argument.
    - "--": emit the marker and switch to TRAILING_ARGUMENT.
    - OPTION_ARGUMENT: emit an argument; back to NONE once the minimum is
      reached; the context is dropped once the maximum is reached.
    - NONE: "--name" / "-x" become option tokens (registered or not); a
      registered option with a positive minimum opens OPTION_ARGUMENT.
      Anything else is an argument.
    """
    arities = {comparer.normalize(switch): arity for switch, arity in arities.items()}

    tokens = []
    treatment = Treatment.NONE
    count, arity = 0, None

    for input in prepare(inputs, comparer=comparer):
        if treatment is Treatment.TRAILING_ARGUMENT:
            tokens.append(Token.argument(input))
        elif comparer(input, MARKER):
            tokens.append(Token.marker())
            treatment = Treatment.TRAILING_ARGUMENT
        elif treatment is Treatment.OPTION_ARGUMENT:
            tokens.append(Token.argument(input))
            count += 1
            if arity.saturates(count):
                treatment = Treatment.NONE
            if arity.fills(count):
                count, arity = 0, None
        else:
            if comparer.startswith(input, LONG_PREFIX):
                switch = input[len(LONG_PREFIX):]
            elif comparer.startswith(input, SHORT_PREFIX) and len(input) > len(SHORT_PREFIX):
                switch = input[len(SHORT_PREFIX):]
            else:
                tokens.append(Token.argument(input))
                continue

            tokens.append(Token.option(switch))
            if (found := arities.get(comparer.normalize(switch))) is not None and found.minimum > 0:
                treatment = Treatment.OPTION_ARGUMENT
                count, arity = 0, found

    logging.debug("smart tokenizer produced %d tokens", len(tokens))
    return tuple(tokens)


def basic(inputs, arities, /, *, comparer=ORDINAL):
    """
    Arity-unaware tokenizer: the marker, then prefix shape alone decides.
    """
    tokens = []
    trailing = False

    for input in prepare(inputs, comparer=comparer):
        if trailing:
            tokens.append(Token.argument(input))
        elif comparer(input, MARKER):
            tokens.append(Token.marker())
            trailing = True
        elif comparer.startswith(input, LONG_PREFIX):
            tokens.append(Token.option(input[len(LONG_PREFIX):]))
        elif comparer.startswith(input, SHORT_PREFIX) and len(input) > len(SHORT_PREFIX):
            tokens.append(Token.option(input[len(SHORT_PREFIX):]))
        else:
            tokens.append(Token.argument(input))

    logging.debug("basic tokenizer produced %d tokens", len(tokens))
    return tuple(tokens)


TOKENIZERS = MappingProxyType({
    "smart": smart,
    "basic": basic,
})


def resolve(strategy, /):
    """
    Return the tokenizer callable for a configuration name or a callable.
    """
    if callable(strategy):
        return strategy
    if not isinstance(strategy, str):
        raise TypeError("tokenizer must be a strategy name or a callable")
    try:
        return TOKENIZERS[strategy]
    except KeyError:
        raise ValueError(
            "unknown tokenizer %r (expected one of: %s)" % (strategy, ", ".join(TOKENIZERS))
        ) from None


def tokenize(inputs, arities, /, *, strategy="smart", comparer=ORDINAL):
    """
    Tokenize 'inputs' with the selected strategy (default: smart).
    """
    return resolve(strategy)(inputs, arities, comparer=comparer)


__all__ = (
    "SHORT_PREFIX",
    "LONG_PREFIX",
    "MARKER",
    "MAPPING_SYMBOL",
    "Treatment",
    "prepare",
    "smart",
    "basic",
    "TOKENIZERS",
    "resolve",
    "tokenize",
)
