"""
Lexer: turns thrift IDL source text into tokens, one at a time.
"""

import string
from dataclasses import dataclass, field
from typing import List, Union

from .errors import LexError, NumberRangeError

# Token kinds.
TOK_SYMBOL  = "SYMBOL"    # single-character punctuation, value is the char
TOK_NUMBER  = "NUMBER"    # value is an int
TOK_STRING  = "STRING"    # value is the text between the quotes
TOK_IDENT   = "IDENT"
TOK_KEYWORD = "KEYWORD"
TOK_COMMENT = "COMMENT"   # never reaches the parser
TOK_EOF     = "EOF"

KEYWORDS = {
    "struct", "service", "enum", "namespace", "required", "optional",
    "oneway", "typedef", "throws", "exception", "include", "const",
}

SYMBOLS = ":.;,={}<>()"

IDENT_START = string.ascii_letters + "_"
IDENT_CHARS = IDENT_START + string.digits

I16_MAX = 2**15 - 1


@dataclass(frozen=True)
class Token:
    kind: str
    value: Union[str, int] = ""
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def describe(self) -> str:
        """Short description used in error messages."""
        if self.kind == TOK_EOF:
            return "end of input"
        if self.kind == TOK_STRING:
            return f"string {self.value!r}"
        if self.kind == TOK_SYMBOL:
            return repr(self.value)
        return f"{self.kind.lower()} {self.value!r}"


class Lexer:
    """
    Cursor over a source buffer.

    ``next_token()`` scans exactly one token starting at the current offset.
    Whitespace is skipped, comments come back as ``TOK_COMMENT`` tokens and
    every call at or past the end of the buffer returns ``TOK_EOF``.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def eof(self) -> bool:
        return self.pos >= len(self.text)

    def _advance(self, count: int = 1) -> str:
        consumed = self.text[self.pos:self.pos + count]
        newlines = consumed.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(consumed) - consumed.rfind("\n")
        else:
            self.column += len(consumed)
        self.pos += len(consumed)
        return consumed

    def _error(self, found: str, line: int, column: int, expected: str = "a token"):
        return LexError(expected, found, line, column)

    def next_token(self) -> Token:
        text = self.text

        while not self.eof() and text[self.pos].isspace():
            self._advance()

        line, column = self.line, self.column
        if self.eof():
            return Token(TOK_EOF, "", line, column)

        ch = text[self.pos]

        if ch in SYMBOLS:
            self._advance()
            return Token(TOK_SYMBOL, ch, line, column)

        # Quoted string, no escapes.
        if ch == '"':
            end = text.find('"', self.pos + 1)
            if end == -1:
                raise self._error("unterminated string literal", line, column,
                                  expected="closing '\"'")
            value = text[self.pos + 1:end]
            self._advance(end + 1 - self.pos)
            return Token(TOK_STRING, value, line, column)

        if ch in string.digits:
            end = self.pos
            while end < len(text) and text[end] in string.digits:
                end += 1
            digits = self._advance(end - self.pos)
            # int() refuses very long digit strings, so check the length first.
            significant = digits.lstrip("0") or "0"
            if len(significant) > len(str(I16_MAX)) or int(significant) > I16_MAX:
                raise NumberRangeError(f"an integer <= {I16_MAX}", digits, line, column)
            return Token(TOK_NUMBER, int(significant), line, column)

        # Line comments: '//' or '#'.
        if ch == "#" or text.startswith("//", self.pos):
            end = self.pos
            while end < len(text) and text[end] not in "\r\n":
                end += 1
            self._advance(end - self.pos)
            return Token(TOK_COMMENT, "", line, column)

        if text.startswith("/*", self.pos):
            end = text.find("*/", self.pos + 2)
            if end == -1:
                raise self._error("unterminated block comment", line, column,
                                  expected="'*/'")
            self._advance(end + 2 - self.pos)
            return Token(TOK_COMMENT, "", line, column)

        if ch in IDENT_START:
            end = self.pos
            while end < len(text) and text[end] in IDENT_CHARS:
                end += 1
            word = self._advance(end - self.pos)
            kind = TOK_KEYWORD if word in KEYWORDS else TOK_IDENT
            return Token(kind, word, line, column)

        raise self._error(f"unexpected character {ch!r}", line, column)


def tokenize(text: str) -> List[Token]:
    """
    Convert IDL source text into a list of tokens.

    Comments are dropped; the list always ends with a single ``TOK_EOF``.
    Raises LexError on unterminated constructs or unexpected characters.
    """
    lexer = Lexer(text)
    tokens: List[Token] = []
    while True:
        tok = lexer.next_token()
        if tok.kind == TOK_COMMENT:
            continue
        tokens.append(tok)
        if tok.kind == TOK_EOF:
            return tokens
