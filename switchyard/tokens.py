"""
Token and arity data model shared by the tokenizers and the parser.

Token
- A tagged variant: Token(kind, value) where kind is a TokenKind.
  • OPTION: value is the bare switch (prefix stripped), e.g. "v" or "verbose".
  • ARGUMENT: value is the raw string.
  • MARKER: the end-of-options marker "--"; carries no value.
- Produced only by tokenizers, consumed left-to-right by the parser.

Arity
- (minimum, maximum) bound on how many argument values an option binds in one
  parse pass. maximum may be INFINITY. Invariant: minimum <= maximum.
- Named arities: NO_ARGUMENT, OPTIONAL_ARGUMENT, ONE_ARGUMENT, ONE_OR_MORE, ZERO_OR_MORE.
"""
import math
from enum import Enum
from typing import NamedTuple

from .utils import Unset

INFINITY = math.inf


class Arity:
    """
    Immutable (minimum, maximum) pair.

    Construction
    - Arity(n)          → (n, n)
    - Arity(n, m)       → (n, m), requires n <= m
    - Arity(n, INFINITY)→ unbounded

    Both bounds must be non-negative integers (maximum may also be INFINITY).
    """
    __slots__ = ("_minimum", "_maximum")

    def __new__(cls, minimum, maximum=Unset, /):
        if maximum is Unset:
            maximum = minimum
        if isinstance(minimum, bool) or not isinstance(minimum, int):
            raise TypeError("arity minimum must be an integer")
        if maximum != INFINITY and (isinstance(maximum, bool) or not isinstance(maximum, int)):
            raise TypeError("arity maximum must be an integer or INFINITY")
        if minimum < 0:
            raise ValueError("arity minimum cannot be negative")
        if maximum < minimum:
            raise ValueError("arity maximum cannot be lower than its minimum")
        self = super().__new__(cls)
        self._minimum = minimum
        self._maximum = maximum
        return self

    @property
    def minimum(self):
        return self._minimum

    @property
    def maximum(self):
        return self._maximum

    @property
    def unbounded(self):
        return self._maximum == INFINITY

    def saturates(self, count, /):
        """
        True when 'count' bound values satisfy the minimum (minimally saturated).
        """
        return count >= self._minimum

    def fills(self, count, /):
        """
        True when 'count' bound values reach the maximum (maximally saturated).
        """
        return count >= self._maximum

    @classmethod
    def coerce(cls, object, /):
        """
        Build an Arity from an Arity or from the nargs vocabulary.

        - Arity → returned unchanged
        - "?"   → OPTIONAL_ARGUMENT
        - "*"   → ZERO_OR_MORE
        - "+"   → ONE_OR_MORE
        - int n → Arity(n, n)
        """
        match object:
            case Arity():
                return object
            case "?":
                return cls.OPTIONAL_ARGUMENT
            case "*":
                return cls.ZERO_OR_MORE
            case "+":
                return cls.ONE_OR_MORE
            case bool():
                raise TypeError("arity must be an Arity, an integer or one of '?', '*', '+'")
            case int():
                return cls(object)
            case str():
                raise ValueError("arity must be one of '?', '*' or '+' when given as a string")
            case _:
                raise TypeError("arity must be an Arity, an integer or one of '?', '*', '+'")

    def __iter__(self):
        yield self._minimum
        yield self._maximum

    def __eq__(self, other):
        if not isinstance(other, Arity):
            return NotImplemented
        return (self._minimum, self._maximum) == (other._minimum, other._maximum)

    def __hash__(self):
        return hash((Arity, self._minimum, self._maximum))

    def __repr__(self):
        maximum = "INFINITY" if self.unbounded else self._maximum
        return f"arity({self._minimum}, {maximum})"

    def __rich_repr__(self):
        yield "minimum", self._minimum
        yield "maximum", self._maximum

    def __reduce__(self):
        return Arity, (self._minimum, self._maximum)


Arity.NO_ARGUMENT = Arity(0, 0)
Arity.OPTIONAL_ARGUMENT = Arity(0, 1)
Arity.ONE_ARGUMENT = Arity(1, 1)
Arity.ONE_OR_MORE = Arity(1, INFINITY)
Arity.ZERO_OR_MORE = Arity(0, INFINITY)


class TokenKind(Enum):
    OPTION = "option"
    ARGUMENT = "argument"
    MARKER = "marker"


class Token(NamedTuple):
    kind: TokenKind
    value: str | None = None

    @classmethod
    def option(cls, value, /):
        return cls(TokenKind.OPTION, value)

    @classmethod
    def argument(cls, value, /):
        return cls(TokenKind.ARGUMENT, value)

    @classmethod
    def marker(cls):
        return cls(TokenKind.MARKER)

    def __repr__(self):
        if self.kind is TokenKind.MARKER:
            return "token(marker)"
        return f"token({self.kind.value}, {self.value!r})"


__all__ = (
    "INFINITY",
    "Arity",
    "TokenKind",
    "Token",
)
