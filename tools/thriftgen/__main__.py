"""
CLI entry point for thriftgen.

Usage:
    python3 -m tools.thriftgen tutorial.thrift --out gen/tutorial.rs
    python3 -m tools.thriftgen tutorial.thrift --out gen/tutorial.rs --config thriftgen.yaml
"""

import argparse
import io
import logging
import os
import sys

from .config import GeneratorConfig, load_config
from .errors import (ConfigError, NamespaceNotFound, ParseError, TemplateRenderError,
                     UnmappedTypeError)
from .generator import Generator, find_namespace
from .parser import Parser


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="thrift IDL to Rust code generator")
    parser.add_argument("idl", help="Input .thrift file")
    parser.add_argument("--out", required=True, help="Output .rs file")
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--lang", help="Namespace language to select (default: rust)")
    parser.add_argument("--templates", help="Directory of template overrides")
    parser.add_argument("--strict", action="store_true", default=None,
                        help="Fail on input that is not a top-level definition")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def resolve_config(args) -> GeneratorConfig:
    """Config file values, overridden by whatever was given on the command line."""
    config = load_config(args.config) if args.config else GeneratorConfig()
    if args.lang is not None:
        config.lang = args.lang
    if args.templates is not None:
        config.template_dir = args.templates
    if args.strict is not None:
        config.strict = args.strict
    return config


def run(args) -> int:
    config = resolve_config(args)

    with open(args.idl, encoding="utf-8") as f:
        text = f.read()

    parser = Parser(text)
    namespace = find_namespace(parser, config.lang) if config.lang else None

    out = io.StringIO()
    count = Generator(template_dir=config.template_dir, strict=config.strict).compile(
        parser, out, namespace)

    outdir = os.path.dirname(args.out)
    if outdir:
        os.makedirs(outdir, exist_ok=True)
    with open(args.out, "w") as f:
        f.write(out.getvalue())

    print(f"  wrote {args.out}")
    print(f"\nGenerated {count} definitions from '{args.idl}'")
    return 0


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        return run(args)
    except (ParseError, NamespaceNotFound, ConfigError, TemplateRenderError,
            UnmappedTypeError, UnicodeDecodeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
