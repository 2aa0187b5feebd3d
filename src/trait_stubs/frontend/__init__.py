"""
Rust front-end: tokenizer, trait parser and return type parser.
"""

from trait_stubs.frontend.parser import TraitParser, parse_trait

__all__ = ["TraitParser", "parse_trait"]
