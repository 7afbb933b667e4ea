"""
thriftgen: thrift IDL compiler producing Rust types and RPC stubs.

The lexer, parser and type mapper are plain Python; code emission is
template-driven through jinja2 (see templates/).
"""
