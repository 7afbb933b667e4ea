"""
Exception types shared by the lexer, parser, type mapper and generator.
"""


class ParseError(SyntaxError):
    """
    The grammar wanted one thing and found another.

    ``expected`` and ``found`` are short human-readable descriptions,
    ``line``/``column`` are 1-based and point at the offending token.
    """

    def __init__(self, expected: str, found: str, line: int, column: int):
        self.expected = expected
        self.found = found
        self.line = line
        self.column = column
        super().__init__(f"Line {line}:{column}: expected {expected}, got {found}")

    def __str__(self):
        return self.args[0]


class LexError(ParseError):
    """Raised on characters the lexer cannot turn into a token."""


class NumberRangeError(LexError):
    """Integer literal does not fit in a signed 16-bit value."""


class EofError(RuntimeError):
    """The parser was advanced after end of input had already been consumed."""


class UnmappedTypeError(LookupError):
    """A primitive projection was asked for a type it has no mapping for."""


class NamespaceNotFound(LookupError):
    """No namespace declaration for the requested language."""


class ConfigError(Exception):
    """Raised when a thriftgen config file fails validation."""


class TemplateRenderError(Exception):
    """A template failed to load or render."""

    def __init__(self, template: str, message: str):
        self.template = template
        super().__init__(f"template {template!r}: {message}")
