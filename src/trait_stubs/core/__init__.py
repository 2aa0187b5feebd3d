"""
Core transform: signature model, placeholder registry, classifier,
synthesizer, emitter and the engine tying them together.
"""

from trait_stubs.core.engine import transform_interface
from trait_stubs.core.registry import DEFAULT_REGISTRY, KnownShapeRegistry, PlaceholderStrategy

__all__ = ["transform_interface", "DEFAULT_REGISTRY", "KnownShapeRegistry", "PlaceholderStrategy"]
