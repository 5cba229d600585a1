"""
Value-type capabilities: validation and conversion of raw argument strings.

Every option carries one value type. The parser only calls validate(raw) while
binding; the façade calls convert(raw) when the caller reads a value back.
convert() raises ConversionError on malformed input; validate() never raises.
Both take the parser's ignore_case, which Choice honours on top of its own flag.

Provided
- String: any string.
- Integer: base-10 integers (int()).
- Float: floating point numbers (float()).
- Boolean: "true" / "false", case-insensitive.
- Choice: one of a fixed set of strings.
- Converter: adapts any callable (e.g. int, pathlib.Path) the way a `type=`
  converter is usually given on the command line.
"""
from .faults import ConversionError, FaultCode, getdoc


class ValueType:
    """
    Base value type. Subclasses override _convert(raw) and, when cheaper, validate(raw).

    'failures' lists the exceptions from _convert that mean "malformed value".
    """
    metavar = "VALUE"
    failures = (ValueError, TypeError)

    def validate(self, raw, /, *, ignore_case=False):
        try:
            self._convert(raw, ignore_case=ignore_case)
        except self.failures:
            return False
        return True

    def convert(self, raw, /, *, ignore_case=False):
        try:
            return self._convert(raw, ignore_case=ignore_case)
        except self.failures as exception:
            raise ConversionError(
                "cannot convert %r to %s" % (raw, self.metavar.lower()),
                title="conversion failure",
                code=FaultCode.CONVERSION_FAILURE,
                hint="pass a value of type %s" % self.metavar.lower(),
                docs=getdoc(FaultCode.CONVERSION_FAILURE),
                type=self,
                value=raw,
            ) from exception

    def _convert(self, raw, /, *, ignore_case=False):
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__.lower()}()"


class String(ValueType):
    metavar = "STRING"

    def validate(self, raw, /, *, ignore_case=False):
        return isinstance(raw, str)

    def _convert(self, raw, /, *, ignore_case=False):
        if not isinstance(raw, str):
            raise TypeError("string value expected")
        return raw


class Integer(ValueType):
    metavar = "INTEGER"

    def _convert(self, raw, /, *, ignore_case=False):
        return int(raw)


class Float(ValueType):
    metavar = "FLOAT"

    def _convert(self, raw, /, *, ignore_case=False):
        return float(raw)


class Boolean(ValueType):
    metavar = "BOOLEAN"

    def _convert(self, raw, /, *, ignore_case=False):
        if not isinstance(raw, str):
            raise TypeError("string value expected")
        match raw.strip().casefold():
            case "true":
                return True
            case "false":
                return False
            case _:
                raise ValueError("boolean value must be 'true' or 'false'")


class Choice(ValueType):
    """
    Accept one of a fixed set of strings.

    With ignore_case=True, or when the parser ignores case, the matching allowed
    spelling (as declared) is returned.
    """

    def __init__(self, *allowed, ignore_case=False):
        if not allowed:
            raise TypeError("choice must allow at least one value")
        seen = []
        for value in allowed:
            if not isinstance(value, str):
                raise TypeError("choice values must be strings")
            if value in seen:
                raise ValueError("choice values cannot contain duplicates")
            seen.append(value)
        self._allowed = tuple(seen)
        self._ignore_case = bool(ignore_case)

    @property
    def allowed(self):
        return self._allowed

    @property
    def metavar(self):
        return "{%s}" % ",".join(self._allowed)

    def _convert(self, raw, /, *, ignore_case=False):
        if not isinstance(raw, str):
            raise TypeError("string value expected")
        ignore_case = self._ignore_case or ignore_case
        for value in self._allowed:
            if value == raw or (ignore_case and value.casefold() == raw.casefold()):
                return value
        raise ValueError("value is not an allowed choice")

    def __repr__(self):
        return f"choice({', '.join(map(repr, self._allowed))})"


class Converter(ValueType):
    """
    Wrap a plain callable; a value is valid when the callable accepts it.

    Any exception the callable raises counts as a rejection.
    """
    failures = (Exception,)

    def __init__(self, callback, /):
        if not callable(callback):
            raise TypeError("converter argument must be callable")
        self._callback = callback

    @property
    def metavar(self):
        return getattr(self._callback, "__name__", "value").upper()

    def _convert(self, raw, /, *, ignore_case=False):
        return self._callback(raw)

    def __repr__(self):
        return f"converter({getattr(self._callback, '__name__', self._callback)!r})"


__all__ = (
    "ValueType",
    "String",
    "Integer",
    "Float",
    "Boolean",
    "Choice",
    "Converter",
)
