"""
String comparison used for switch lookup, prefix detection and the end-of-options marker.

A Comparer is an explicit equality predicate: it is handed to the tokenizer,
the parser and the façade instead of living in shared mutable configuration.
Case-insensitive comparison relies on str.casefold; both sides are brought to
the same unicode normalization form first so that composed and decomposed
spellings of a switch compare equal.
"""
import unicodedata


class Comparer:
    """
    Equality predicate over strings with optional case folding.

    Parameters
    - ignore_case: bool
      When True, strings are casefolded before comparison.
    - form: "NFC" | "NFD" | "NFKC" | "NFKD"
      Unicode normalization applied before comparison.
    """
    __slots__ = ("_ignore_case", "_form")

    def __init__(self, ignore_case=False, form="NFC"):
        if form not in ("NFC", "NFD", "NFKC", "NFKD"):
            raise ValueError("comparer 'form' must be one of 'NFC', 'NFD', 'NFKC' or 'NFKD'")
        self._ignore_case = bool(ignore_case)
        self._form = form

    @property
    def ignore_case(self):
        return self._ignore_case

    @property
    def form(self):
        return self._form

    def normalize(self, text, /):
        """
        Return the canonical form of 'text' used for equality and dictionary keys.
        """
        if not isinstance(text, str):
            raise TypeError("comparer argument must be a string")
        text = unicodedata.normalize(self._form, text)
        return text.casefold() if self._ignore_case else text

    def __call__(self, left, right, /):
        return self.normalize(left) == self.normalize(right)

    def startswith(self, text, prefix, /):
        return self.normalize(text).startswith(self.normalize(prefix))

    def __eq__(self, other):
        if not isinstance(other, Comparer):
            return NotImplemented
        return (self._ignore_case, self._form) == (other._ignore_case, other._form)

    def __hash__(self):
        return hash((Comparer, self._ignore_case, self._form))

    def __repr__(self):
        return f"comparer(ignore_case={self._ignore_case!r}, form={self._form!r})"

    def __rich_repr__(self):
        yield "ignore_case", self._ignore_case
        yield "form", self._form


ORDINAL = Comparer()
IGNORE_CASE = Comparer(ignore_case=True)


__all__ = (
    "Comparer",
    "ORDINAL",
    "IGNORE_CASE",
)
