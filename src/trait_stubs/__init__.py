"""
trait-stubs Package.

Rewrites Rust traits so that, in `cfg(test)` builds, every method without a
default implementation gets a placeholder body. Test code can then implement
a trait partially; calling a method it did not implement panics with
``not yet implemented: <method>``. Production builds keep the original
abstract methods.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import trait_stubs

    code = "#[test_stubs]\\ntrait T {\\n    fn g(&self);\\n}\\n"
    print(trait_stubs.stub(code))

Structured Usage
^^^^^^^^^^^^^^^^

.. code-block:: python

    from trait_stubs import parse_trait, transform_interface, render_interface

    definition = parse_trait("trait T { fn g(&self) -> Option<u8>; }")
    rewritten = transform_interface(definition)
    print(render_interface(rewritten))
"""

from typing import Optional

from trait_stubs.backend.render import render_interface
from trait_stubs.config import RuntimeConfig
from trait_stubs.core.engine import transform_interface
from trait_stubs.core.registry import DEFAULT_REGISTRY, KnownShapeRegistry
from trait_stubs.errors import MalformedDefinition
from trait_stubs.frontend.parser import parse_trait
from trait_stubs.pipeline import StubResult, stub_source

__version__ = "0.1.0"


def stub(
  code: str,
  config: Optional[RuntimeConfig] = None,
  registry: KnownShapeRegistry = DEFAULT_REGISTRY,
) -> str:
  """
  Rewrites every marked trait in a string of Rust code.

  Args:
      code (str): The source code.
      config (RuntimeConfig, optional): Marker, cfg predicate and rendering options.
      registry (KnownShapeRegistry): Placeholder strategy table.

  Returns:
      str: The rewritten source code.

  Raises:
      ValueError: If any marked definition could not be rewritten.
  """
  result = stub_source(code, config, registry)
  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Rewriting failed:\n{error_msg}")
  return result.code


__all__ = [
  "stub",
  "parse_trait",
  "transform_interface",
  "render_interface",
  "RuntimeConfig",
  "KnownShapeRegistry",
  "MalformedDefinition",
  "StubResult",
  "__version__",
]
