"""
Rust back-end: renders rewritten traits to source text.
"""

from trait_stubs.backend.render import render_interface

__all__ = ["render_interface"]
