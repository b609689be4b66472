"""Interfaces for parsing Ruby source code."""

from .ruby_parser import ParseError, ParseResult, RubySyntaxError, decode_escape, parse_ruby

__all__ = ["ParseError", "ParseResult", "RubySyntaxError", "decode_escape", "parse_ruby"]
