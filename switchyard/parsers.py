"""
Switchyard façade: register options, parse argv-like input, read typed values back.

What this module provides
- OptionParser: owns the option specs, runs tokenizer then parser, performs the
  post-pass checks (required options, optional duplicate detection) and exposes
  typed getters plus a rich help renderer.
- ParseResult: the immutable outcome of one parse call (values, parameters).

Quick start
    from switchyard import OptionParser, Option, Mode, Integer, flag

    parser = OptionParser(
        flag("-v", "--verbose", descr="chatty output"),
        Option("-o", "--output", arity=1, mode=Mode.REQUIRED, descr="output file"),
        Option("-j", "--jobs", type=Integer(), default=1),
        name="tool",
    )
    result = parser.parse(["-v", "-o", "out.txt", "file1"])
    result.get_value("verbose")   # True
    result.get_value("-o")        # "out.txt"
    result.parameters             # ("file1",)

Pipeline of parse()
1. normalize the prompt (sys.argv[1:], a shell-like string, or an iterable of strings)
2. warn about empty inline values ("--name=")
3. tokenize with the configured strategy
4. pre-pass: every option token must name a registered switch
5. token walk (switchyard.parsing)
6. required-option check, then duplicate check when unique=True

Every fault aborts the pass. Outside shell mode faults are raised; in shell mode
they are rendered (after the help) on stderr and the process exits with status 1.

Design notes
- Results are fresh per call; nothing accumulates across parse() calls.
- The façade getters read the latest result; prefer the returned ParseResult
  when one parser instance is shared.
"""
import logging as logmod
import os.path
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .comparers import Comparer
from .faults import *
from .options import Option
from .parsing import Outcome, Parser, SENTINEL
from .tokenizers import prepare, resolve, MARKER, MAPPING_SYMBOL, SHORT_PREFIX
from .tokens import TokenKind
from .utils import *

logging = logmod.getLogger(__name__)


def _strip(switch):
    """
    Accept "-o", "--output" or the bare "o"/"output" and return the bare switch.
    """
    if switch.startswith("--"):
        return switch[2:]
    if switch.startswith("-") and len(switch) > 1:
        return switch[1:]
    return switch


def _signature(option):
    """
    Render the arity of an option as metavar placeholders (help/usage).

    (0,0) → ""          (0,1) → "[M]"         (1,1) → "M"
    (2,2) → "M M"       (0,∞) → "[M ...]"     (1,∞) → "M [M ...]"
    """
    if option.flag:
        return ""
    metavar = coalesce(option.metavar or Unset, option.type.metavar)
    arity = option.arity
    parts = [metavar] * arity.minimum
    if arity.unbounded:
        parts.append("[%s ...]" % metavar)
    else:
        parts.extend(["[%s]" % metavar] * (arity.maximum - arity.minimum))
    return " ".join(parts)


class ParseResult:
    """
    Immutable outcome of one parse call.

    Switch lookup accepts a bare switch ("o"), a prefixed switch ("-o",
    "--output") or the Option itself. Unknown switches raise OptionNotFoundError.
    """

    def __init__(self, options, outcome, /, *, comparer):
        self._options = tuple(options)
        self._bindings = outcome.bindings
        self._matches = outcome.matches
        self._parameters = outcome.parameters
        self._comparer = comparer
        self._switches = {}
        for option in self._options:
            for switch in option.switches:
                self._switches.setdefault(comparer.normalize(switch), option)

    @property
    def parameters(self):
        return self._parameters

    @property
    def matches(self):
        return self._matches

    @property
    def bindings(self):
        return self._bindings

    def option(self, switch, /):
        """
        Return the Option registered under 'switch'.
        """
        if isinstance(switch, Option):
            if switch in self._options:
                return switch
            raise OptionNotFoundError(
                "option %r is not registered" % switch.label,
                title="option not found",
                code=FaultCode.OPTION_NOT_FOUND,
                hint="query the option object that was registered, or one of its switches",
                docs=getdoc(FaultCode.OPTION_NOT_FOUND),
                switch=switch.label,
                option=switch,
            )
        if not isinstance(switch, str):
            raise TypeError("switch must be a string or an option")
        try:
            return self._switches[self._comparer.normalize(_strip(switch))]
        except KeyError:
            raise OptionNotFoundError(
                "option %r not found" % switch,
                title="option not found",
                code=FaultCode.OPTION_NOT_FOUND,
                hint="query one of the registered switches",
                docs=getdoc(FaultCode.OPTION_NOT_FOUND),
                switch=switch,
            ) from None

    def _convert(self, option, value):
        if value is SENTINEL:
            return value
        return option.type.convert(value, ignore_case=self._comparer.ignore_case)

    def is_set(self, switch, /):
        return self.option(switch) in self._bindings

    def get_value(self, switch, /):
        """
        First bound value (converted), True for a value-less occurrence, the default when absent.
        """
        option = self.option(switch)
        try:
            values = self._bindings[option]
        except KeyError:
            return option.default
        return self._convert(option, values[0])

    def get_values(self, switch, /):
        """
        Every bound value (converted); (default,) when absent with a default, () otherwise.
        """
        option = self.option(switch)
        try:
            values = self._bindings[option]
        except KeyError:
            return () if option.default is None else (option.default,)
        return tuple(self._convert(option, value) for value in values)

    def __getitem__(self, switch):
        return self.get_value(switch)

    def __contains__(self, switch):
        try:
            return self.is_set(switch)
        except (OptionNotFoundError, TypeError):
            return False

    def __rich_repr__(self):
        for option in self._options:
            if option in self._bindings:
                yield option.label, self.get_values(option)
        yield "parameters", self._parameters

    def __repr__(self):
        return "parse-result(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


class OptionParser:
    """
    Option registry and parse driver.

    Parameters
    - *options: Option specs to register right away (see add_options).
    - name: program name for usage/help (defaults to __prog__ in __main__ or argv[0]).
    - descr / epilog: help paragraphs.
    - tokenizer: "smart" | "basic" | callable (see switchyard.tokenizers).
    - ignore_case: compare switches case-insensitively.
    - unique: reject an option matched more than once in one pass.
    - shell / fancy / colorful: rendering of faults and help.
    """

    def __init__(
            self,
            *options,
            name=Unset,
            descr=Unset,
            epilog=Unset,
            tokenizer="smart",
            ignore_case=False,
            unique=False,
            shell=False,
            fancy=False,
            colorful=True
    ):
        for field, value in (("name", name), ("descr", descr), ("epilog", epilog)):
            if not isinstance(value, str | Text | Unset):
                raise TypeError(f"option-parser {field!r} must be a string")
        for field, value in (
                ("ignore_case", ignore_case), ("unique", unique),
                ("shell", shell), ("fancy", fancy), ("colorful", colorful)
        ):
            if not isinstance(value, bool):
                raise TypeError(f"option-parser {field!r} must be a boolean")

        self._name = coalesce(
            name, getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]) or "switchyard")
        )
        self._descr = coalesce(descr)
        self._epilog = coalesce(epilog)
        self._tokenizer = resolve(tokenizer)
        self._comparer = Comparer(ignore_case=ignore_case)
        self._unique = unique
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful
        self._options = []
        self._switches = {}
        self._result = ParseResult((), Outcome(MappingProxyType({}), (), ()), comparer=self._comparer)
        self.add_options(*options)

    name = property(lambda self: self._name)
    descr = property(lambda self: self._descr)
    epilog = property(lambda self: self._epilog)
    tokenizer = property(lambda self: self._tokenizer)
    comparer = property(lambda self: self._comparer)
    unique = property(lambda self: self._unique)
    shell = property(lambda self: self._shell)
    fancy = property(lambda self: self._fancy)
    colorful = property(lambda self: self._colorful)

    @property
    def options(self):
        return tuple(self._options)

    @property
    def switches(self):
        """
        Read-only mapping of every registered bare switch to its option.
        """
        return MappingProxyType({
            switch: option for option in self._options for switch in option.switches
        })

    @property
    def arities(self):
        return MappingProxyType({
            switch: option.arity for option in self._options for switch in option.switches
        })

    @property
    def result(self):
        return self._result

    def add_options(self, *options):
        """
        Register options. All-or-nothing: on error nothing is registered.

        Raises
        - TypeError: an object is not an Option.
        - DuplicateSwitchError: a switch is already taken (as compared by the parser's comparer).
        """
        pending = {}
        for option in options:
            if not isinstance(option, Option):
                raise TypeError("add_options() arguments must be options")
            for switch in option.switches:
                key = self._comparer.normalize(switch)
                if key in self._switches or key in pending:
                    raise DuplicateSwitchError(
                        "switch %r is already registered" % display(switch),
                        title="duplicate switch",
                        code=FaultCode.DUPLICATE_SWITCH,
                        hint="give every option its own switches",
                        docs=getdoc(FaultCode.DUPLICATE_SWITCH),
                        switch=switch,
                        option=option,
                    )
                pending[key] = option

        self._switches.update(pending)
        for option in options:
            self._options.append(option)
            logging.debug("registered %r", option)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime options (help is shown first for shell errors).
        """
        if self._shell and isinstance(fault, ParserException):
            self.print_help(stderr=True)
        trigger(fault, **options, tool=self, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def _inputs(self, arguments):
        if arguments is Unset:
            return sys.argv[1:]
        if isinstance(arguments, str):
            return shlex.split(arguments)
        if isinstance(arguments, Iterable):
            inputs = list(arguments)
            if not all(isinstance(input, str) for input in inputs):
                raise TypeError("parse() argument must be a string or an iterable of strings")
            return inputs
        raise TypeError("parse() argument must be a string or an iterable of strings")

    def _check_inline(self, inputs, tokens):
        """
        Warn for "--name=" inputs whose switch was read as an option.

        Both strategies emit one token per prepared string, so the token at the
        offset of the split-off switch tells whether the arity context consumed it.
        """
        offset = 0
        for index, input in enumerate(inputs):
            if self._comparer(input, MARKER):
                return
            offset += len(prepare([input], comparer=self._comparer))
            head, separator, tail = input.partition(MAPPING_SYMBOL)
            if not separator or tail or not self._comparer.startswith(head, SHORT_PREFIX):
                continue
            if offset - 2 < len(tokens) and tokens[offset - 2].kind is TokenKind.OPTION:
                self.trigger(EmptyInlineValueWarning(
                    "empty inline value for %r at %s position" % (head, ordinal(index + 1)),
                    title="empty inline value",
                    code=FaultCode.EMPTY_INLINE_VALUE,
                    hint="add a value after '=' (for example: %s=<value>)" % head,
                    docs=getdoc(FaultCode.EMPTY_INLINE_VALUE),
                    switch=_strip(head),
                    index=index,
                ))

    def _check(self, outcome):
        matched = set(outcome.matches)
        for option in self._options:
            if option.required and option not in matched:
                raise RequiredOptionMissingError(
                    "required option %r is missing" % option.label,
                    title="required option missing",
                    code=FaultCode.REQUIRED_OPTION_MISSING,
                    hint="add %s to the command line" % " ".join(filter(None, (option.label, _signature(option)))),
                    docs=getdoc(FaultCode.REQUIRED_OPTION_MISSING),
                    option=option,
                    switch=option.switches[0],
                )

        if self._unique:
            seen = defaultdict(int)
            for option in outcome.matches:
                seen[option] += 1
                if seen[option] > 1:
                    raise DuplicatedOptionError(
                        "option %r was already provided" % option.label,
                        title="duplicated option",
                        code=FaultCode.DUPLICATED_OPTION,
                        hint="keep a single %s; each option can be specified only once" % option.label,
                        docs=getdoc(FaultCode.DUPLICATED_OPTION),
                        option=option,
                        switch=option.switches[0],
                    )

    def parse(self, arguments=Unset, /):
        """
        Parse 'arguments' and return a fresh ParseResult (also kept as self.result).

        Parameters
        - arguments:
          • Unset: read sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Raises (outside shell mode)
        - UnregisteredSwitchError, RequiredArgumentMissingError, ArgumentValidityError,
          RequiredOptionMissingError, DuplicatedOptionError.
        - TypeError: when 'arguments' is not a string or an iterable of strings.
        """
        inputs = self._inputs(arguments)
        parser = Parser(self._options, comparer=self._comparer)

        try:
            tokens = self._tokenizer(inputs, self.arities, comparer=self._comparer)
            self._check_inline(inputs, tokens)
            for index, token in enumerate(tokens):
                if token.kind is TokenKind.OPTION:
                    parser.resolve(token.value, index=index)
            outcome = parser.parse(tokens)
            self._check(outcome)
        except ParserException as fault:
            logging.debug("parse aborted: %s", fault.message)
            self.trigger(fault)
            raise

        self._result = ParseResult(self._options, outcome, comparer=self._comparer)
        logging.debug("parsed %d input(s) into %r", len(inputs), self._result)
        return self._result

    def get_value(self, switch, /):
        return self._result.get_value(switch)

    def get_values(self, switch, /):
        return self._result.get_values(switch)

    def is_set(self, switch, /):
        return self._result.is_set(switch)

    @property
    def parameters(self):
        return self._result.parameters

    def help(self):
        """
        Build the help renderable.

        Palette keys
        - usage-label, program-name, usage-section, description-section, epilog-section
        - group-label, option-name, metavar, required, default, argument-description
        - panel-title

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed.
        """
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "usage-section": "bold #36C5F0",
            "description-section": "italic #A3A3A3",
            "epilog-section": "#737373",
            "group-label": "bold #FFFFFF",
            "option-name": "bold #00E6FF",
            "metavar": "bold #FFD600",
            "required": "bold #EF4444",
            "default": "#737373",
            "argument-description": "#9CA3AF",
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._colorful else ""

        def text(fragment, style=""):
            if not self._colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        visible = [option for option in self._options if not option.hidden]

        usage = Text()
        usage.append(text("usage", styler("usage-label"))).append(": ")
        usage.append(text(self._name, styler("program-name")))
        for option in filter(lambda x: x.required, visible):
            usage.append(" ").append(text(option.label, styler("usage-section")))
            if signature := _signature(option):
                usage.append(" ").append(text(signature, styler("metavar")))
        if any(not option.required for option in visible):
            usage.append(" [options]")
        usage.append(" [%s] [parameters ...]" % MARKER)
        renders = [usage]

        if self._descr:
            renders.append(Text("\n").append(text(self._descr, styler("description-section"))))

        if visible:
            section = Text("\n")
            section.append(text("options", styler("group-label"))).append(":")
            indent = 2 + max(
                len(", ".join(option.names) + " " + _signature(option)) for option in visible
            ) + 2
            for option in visible:
                line = Text("\n  ")
                line.append(Text(", ").join(text(name, styler("option-name")) for name in option.names))
                if signature := _signature(option):
                    line.append(" ").append(text(signature, styler("metavar")))
                line.append(" " * max(indent - len(line.plain) + 1, 2))
                if option.descr:
                    line.append(text(option.descr, styler("argument-description")))
                if option.required:
                    line.append(" ").append(text("(required)", styler("required")))
                elif not option.flag and option.default is not None:
                    line.append(" ").append(text("(default: %r)" % (option.default,), styler("default")))
                line.rstrip()
                section.append(line)
            renders.append(section)

        if self._epilog:
            renders.append(Text("\n").append(text(self._epilog, styler("epilog-section"))))

        renderable = Group(*renders)
        if self._fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", f"{self._name} help".upper(), " ]", style=styler("panel-title")),
                title_align="left",
            )
        return renderable

    def print_help(self, *, stderr=False):
        Console(stderr=stderr).print(self.help())

    def __rich_repr__(self):
        yield "name", self._name
        yield "options", self.options

    def __repr__(self):
        return "option-parser(name=%r, options=%r)" % (self._name, self.options)


__all__ = (
    "OptionParser",
    "ParseResult",
)
