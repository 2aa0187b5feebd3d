"""
Command line interface for trait-stubs.
"""
