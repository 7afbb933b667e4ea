"""
Generator: drives the parser over a whole schema and renders each top-level
definition through the jinja2 templates in ``templates/``.
"""

import dataclasses
import io
import logging
import os
import re
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from jinja2 import (ChoiceLoader, Environment, FileSystemLoader, StrictUndefined,
                    TemplateError)

from .errors import ConfigError, NamespaceNotFound, TemplateRenderError
from .parser import Namespace, Parser
from .types import const_type, is_primitive, read_expr, rust_type, to_protocol

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".rs.j2"

# Top-level keyword → (parser routine, templates rendered for it).
# Namespaces are consumed but produce no output.
DISPATCH = [
    ("namespace", "parse_namespace", ()),
    ("include",   "parse_include",   ("include",)),
    ("typedef",   "parse_typedef",   ("typedef",)),
    ("const",     "parse_const",     ("const",)),
    ("enum",      "parse_enum",      ("enum",)),
    ("struct",    "parse_struct",    ("struct",)),
    ("exception", "parse_exception", ("exception",)),
    ("service",   "parse_service",   ("service", "service_client", "service_server")),
]


def module_name(path: str) -> str:
    """Rust module name for an included schema path: "../shared.thrift" → "shared"."""
    stem = os.path.splitext(os.path.basename(path))[0]
    return re.sub(r"\W", "_", stem)


def create_environment(template_dir: Optional[str] = None) -> Environment:
    """
    Create the jinja2 environment used for code generation.

    Templates in ``template_dir`` take priority over the packaged ones, so a
    project can override a single construct's output.
    """
    loaders = []
    if template_dir is not None:
        if not os.path.isdir(template_dir):
            raise ConfigError(f"Template directory '{template_dir}' does not exist")
        loaders.append(FileSystemLoader(str(template_dir)))
    loaders.append(FileSystemLoader(str(TEMPLATES_DIR)))

    env = Environment(
        loader=ChoiceLoader(loaders),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["to_rust"] = rust_type
    env.filters["const_type"] = const_type
    env.filters["to_protocol"] = to_protocol
    env.filters["expr"] = read_expr
    env.filters["module_name"] = module_name
    env.tests["primitive"] = is_primitive
    return env


def to_record(node):
    """
    Convert an AST node into plain dicts, lists and scalars for the templates.

    Dataclasses and named tuples become dicts keyed by field name, enum
    members become their value, sequences become lists.
    """
    if isinstance(node, Enum):
        return node.value
    if isinstance(node, tuple) and hasattr(node, "_asdict"):
        return {k: to_record(v) for k, v in node._asdict().items()}
    if dataclasses.is_dataclass(node) and not isinstance(node, type):
        return {f.name: to_record(getattr(node, f.name))
                for f in dataclasses.fields(node)}
    if isinstance(node, (list, tuple)):
        return [to_record(v) for v in node]
    return node


def find_namespace(parser: Parser, lang: str) -> Namespace:
    """
    Consume namespace declarations until one for ``lang`` is found.

    Raises NamespaceNotFound once the leading namespace declarations run out
    without a match, whether at end of input or at another construct.
    """
    while parser.lookahead_keyword("namespace"):
        ns = parser.parse_namespace()
        if ns.lang == lang:
            return ns
        logger.debug("skipping namespace %s %s", ns.lang, ns.module)
    raise NamespaceNotFound(f"No namespace declared for language '{lang}'")


class Generator:
    """Renders parsed definitions, in source order, into one output stream."""

    def __init__(self, env: Optional[Environment] = None,
                 template_dir: Optional[str] = None, strict: bool = False):
        self.env = env or create_environment(template_dir)
        self.strict = strict

    def render(self, name: str, data: Dict) -> str:
        try:
            return self.env.get_template(name + TEMPLATE_SUFFIX).render(data)
        except TemplateError as e:
            raise TemplateRenderError(name, str(e)) from e

    def compile(self, parser: Parser, out: TextIO,
                namespace: Optional[Namespace] = None) -> int:
        """
        Parse and render every top-level definition, then write the result.

        Nothing is written unless the whole input parses and renders.
        Returns the number of definitions emitted.
        """
        fragments: List[str] = [
            self.render("base", {"namespace": namespace.module if namespace else None}),
        ]
        count = 0

        while True:
            for keyword, routine, templates in DISPATCH:
                if parser.lookahead_keyword(keyword):
                    break
            else:
                break

            node = getattr(parser, routine)()
            if not templates:
                logger.debug("ignoring %s %r", keyword, node)
                continue

            logger.debug("emitting %s via %s", keyword, ", ".join(templates))
            data = {keyword: to_record(node)}
            fragments.extend(self.render(name, data) for name in templates)
            count += 1

        if not parser.at_eof():
            if self.strict:
                raise parser.error("a top-level definition")
            tok = parser.peek()
            logger.warning("Line %d:%d: stopped at %s, rest of input ignored",
                           tok.line, tok.column, tok.describe())

        out.write("".join(fragments))
        return count


def compile_source(text: str, lang: Optional[str] = "rust",
                   template_dir: Optional[str] = None, strict: bool = False) -> str:
    """
    Compile a whole schema held in memory and return the generated source.

    With ``lang`` set the schema must open with a namespace declaration for
    that language; ``lang=None`` skips namespace selection.
    """
    parser = Parser(text)
    namespace = find_namespace(parser, lang) if lang else None
    out = io.StringIO()
    Generator(template_dir=template_dir, strict=strict).compile(parser, out, namespace)
    return out.getvalue()
