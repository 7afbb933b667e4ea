"""
Parser: recursive-descent parser over the lexer's token stream.

Holds a single token of lookahead.  Each top-level construct has its own
``parse_*`` routine; the generator peeks with ``lookahead_keyword`` to decide
which one to call next.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Union

from .errors import EofError, ParseError
from .lexer import (Lexer, Token, TOK_COMMENT, TOK_EOF, TOK_IDENT, TOK_KEYWORD,
                    TOK_NUMBER, TOK_STRING, TOK_SYMBOL)


# ── AST nodes ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Include:
    path: str


@dataclass(frozen=True)
class Namespace:
    lang: str
    module: str


class Typedef(NamedTuple):
    alias_type: str
    alias_name: str


@dataclass(frozen=True)
class EnumDef:
    ident: str
    variants: List[str]


class FieldAttribute(Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class StructField:
    seq: int
    attr: FieldAttribute
    ty: str          # raw IDL type name, resolved later by types.parse_ty
    ident: str


@dataclass(frozen=True)
class StructDef:
    ident: str
    fields: List[StructField]


@dataclass(frozen=True)
class ExceptionDef:
    ident: str
    fields: List[StructField]


@dataclass(frozen=True)
class Const:
    ty: str
    ident: str
    value: Union[int, str]
    is_literal: bool = False   # value was a quoted string


@dataclass(frozen=True)
class Argument:
    seq: int
    ty: str
    ident: str


@dataclass(frozen=True)
class Function:
    oneway: bool
    returns: str
    ident: str
    args: List[Argument]
    throws: List[Argument]


@dataclass(frozen=True)
class Service:
    ident: str
    extends: Optional[str]
    functions: List[Function]


# ── Parser ───────────────────────────────────────────────────────────

class Parser:
    """
    Recursive-descent parser for thrift IDL.

    Accepts either source text or an existing ``Lexer``.  The first token is
    pulled lazily on first use.  A failed ``parse_*`` raises ``ParseError``
    and returns no node.
    """

    def __init__(self, source: Union[str, Lexer]):
        self.lexer = Lexer(source) if isinstance(source, str) else source
        self.token: Optional[Token] = None
        self._last_token_eof = False

    # ── Token helpers ────────────────────────────────────────────────

    def bump(self):
        """Load the next non-comment token into the lookahead slot."""
        if self._last_token_eof:
            raise EofError("attempted to advance past end of input")
        if self.token is not None and self.token.kind == TOK_EOF:
            self._last_token_eof = True

        tok = self.lexer.next_token()
        while tok.kind == TOK_COMMENT:
            tok = self.lexer.next_token()
        self.token = tok

    def peek(self) -> Token:
        if self.token is None:
            self.bump()
        return self.token

    def at_eof(self) -> bool:
        return self.peek().kind == TOK_EOF

    def error(self, expected: str) -> ParseError:
        tok = self.peek()
        return ParseError(expected, tok.describe(), tok.line, tok.column)

    def eat(self, kind: str, value=None) -> bool:
        """Consume the lookahead if it matches; leave it alone otherwise."""
        tok = self.peek()
        if tok.kind != kind or (value is not None and tok.value != value):
            return False
        self.bump()
        return True

    def eat_keyword(self, keyword: str) -> bool:
        return self.eat(TOK_KEYWORD, keyword)

    def lookahead_keyword(self, keyword: str) -> bool:
        tok = self.peek()
        return tok.kind == TOK_KEYWORD and tok.value == keyword

    def expect(self, kind: str, value=None) -> Token:
        tok = self.peek()
        if not self.eat(kind, value):
            raise self.error(repr(value) if value is not None else kind.lower())
        return tok

    def expect_keyword(self, keyword: str):
        if not self.eat_keyword(keyword):
            raise self.error(f"keyword {keyword!r}")

    def expect_ident(self) -> str:
        tok = self.peek()
        if tok.kind != TOK_IDENT:
            raise self.error("identifier")
        self.bump()
        return tok.value

    parse_ident = expect_ident

    def parse_number(self) -> int:
        tok = self.peek()
        if tok.kind != TOK_NUMBER:
            raise self.error("number")
        self.bump()
        return tok.value

    def expect_string(self) -> str:
        tok = self.peek()
        if tok.kind != TOK_STRING:
            raise self.error("quoted string")
        self.bump()
        return tok.value

    def _parse_list(self, item, separator: str, close: str) -> list:
        """
        ``item (separator item)* separator? close``, possibly empty.

        A missing separator ends the list; ``close`` is then required.
        """
        items = []
        while True:
            if self.eat(TOK_SYMBOL, close):
                return items
            items.append(item())
            if not self.eat(TOK_SYMBOL, separator):
                break
        self.expect(TOK_SYMBOL, close)
        return items

    # ── Header constructs ────────────────────────────────────────────

    def parse_include(self) -> Include:
        self.expect_keyword("include")
        return Include(path=self.expect_string())

    def parse_namespace(self) -> Namespace:
        self.expect_keyword("namespace")
        lang = self.expect_ident()
        module = self.expect_ident()
        return Namespace(lang=lang, module=module)

    # ── Types ────────────────────────────────────────────────────────

    def parse_typedef(self) -> Typedef:
        self.expect_keyword("typedef")
        alias_type = self.expect_ident()
        alias_name = self.expect_ident()
        return Typedef(alias_type, alias_name)

    def parse_enum(self) -> EnumDef:
        self.expect_keyword("enum")
        ident = self.expect_ident()
        self.expect(TOK_SYMBOL, "{")
        variants = self._parse_list(self.parse_ident, ",", "}")
        return EnumDef(ident=ident, variants=variants)

    def parse_struct(self) -> StructDef:
        self.expect_keyword("struct")
        ident = self.expect_ident()
        self.expect(TOK_SYMBOL, "{")
        fields = self._parse_list(self.parse_struct_field, ";", "}")
        return StructDef(ident=ident, fields=fields)

    def parse_exception(self) -> ExceptionDef:
        self.expect_keyword("exception")
        ident = self.expect_ident()
        self.expect(TOK_SYMBOL, "{")
        fields = self._parse_list(self.parse_struct_field, ";", "}")
        return ExceptionDef(ident=ident, fields=fields)

    def parse_struct_field(self) -> StructField:
        seq = self.parse_number()
        self.expect(TOK_SYMBOL, ":")

        if self.eat_keyword("optional"):
            attr = FieldAttribute.OPTIONAL
        elif self.eat_keyword("required"):
            attr = FieldAttribute.REQUIRED
        else:
            raise self.error("'optional' or 'required'")

        ty = self.parse_ident()
        ident = self.parse_ident()
        return StructField(seq=seq, attr=attr, ty=ty, ident=ident)

    def parse_const(self) -> Const:
        self.expect_keyword("const")
        ty = self.expect_ident()
        ident = self.expect_ident()
        self.expect(TOK_SYMBOL, "=")

        tok = self.peek()
        if tok.kind not in (TOK_NUMBER, TOK_STRING, TOK_IDENT):
            raise self.error("constant value")
        self.bump()
        return Const(ty=ty, ident=ident, value=tok.value,
                     is_literal=tok.kind == TOK_STRING)

    # ── Services ─────────────────────────────────────────────────────

    def parse_service(self) -> Service:
        self.expect_keyword("service")
        ident = self.expect_ident()

        extends = None
        if self.eat(TOK_IDENT, "extends"):
            extends = self.expect_ident()

        self.expect(TOK_SYMBOL, "{")
        functions = self._parse_list(self.parse_function, ";", "}")
        return Service(ident=ident, extends=extends, functions=functions)

    def parse_function(self) -> Function:
        oneway = self.eat_keyword("oneway")
        returns = self.parse_ident()
        ident = self.parse_ident()

        self.expect(TOK_SYMBOL, "(")
        args = self._parse_list(self.parse_argument, ",", ")")

        throws: List[Argument] = []
        if self.eat_keyword("throws"):
            self.expect(TOK_SYMBOL, "(")
            throws = self._parse_list(self.parse_argument, ",", ")")

        return Function(oneway=oneway, returns=returns, ident=ident,
                        args=args, throws=throws)

    def parse_argument(self) -> Argument:
        seq = self.parse_number()
        self.expect(TOK_SYMBOL, ":")
        ty = self.parse_ident()
        ident = self.parse_ident()
        return Argument(seq=seq, ty=ty, ident=ident)
