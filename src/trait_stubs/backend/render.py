"""
Trait Renderer.

Turns a `RewrittenInterfaceDefinition` back into Rust source.

Untagged items are copied verbatim. A generated pair renders as::

    /// docs
    #[cfg(not(test))]
    fn g(&self) -> u8;

    /// docs
    #[cfg(test)]
    #[allow(unused_variables)]
    #[allow(unreachable_code)]
    fn g(&self) -> u8 { todo!("g") }
"""

from typing import Optional

from trait_stubs.config import RuntimeConfig
from trait_stubs.core.model import InterfaceItem, Method, RewrittenInterfaceDefinition
from trait_stubs.enums import BuildMode

LINT_ALLOWANCES = ("#[allow(unused_variables)]", "#[allow(unreachable_code)]")


def render_interface(rewritten: RewrittenInterfaceDefinition, config: Optional[RuntimeConfig] = None) -> str:
  cfg = config or RuntimeConfig()
  parts = [rewritten.header]
  parts.extend(render_item(item, cfg) for item in rewritten.items)
  parts.append(rewritten.footer)
  return "".join(parts)


def render_item(item: InterfaceItem, config: RuntimeConfig) -> str:
  if not isinstance(item, Method) or item.build_mode is None:
    return item.layout.source
  if item.build_mode is BuildMode.NOT_TEST:
    return _render_production(item, config)
  return _render_test(item, config)


def _render_production(method: Method, config: RuntimeConfig) -> str:
  """The declared method, byte for byte, with the not-test selector in front of its keyword."""
  layout = method.layout
  cut = len(layout.lead) + len(layout.decorations)
  return f"{layout.source[:cut]}{config.not_test_selector}\n{layout.indent}{layout.source[cut:]}"


def _render_test(method: Method, config: RuntimeConfig) -> str:
  layout = method.layout
  indent = layout.indent
  # Same separation from the preceding item as the declaration, minus any trailing comment.
  newline = layout.lead.find("\n")
  lead = layout.lead[newline:] if newline >= 0 else f"\n{indent}"

  attrs = [config.test_selector]
  if config.allow_lints:
    attrs.extend(LINT_ALLOWANCES)
  attr_text = "".join(f"{a}\n{indent}" for a in attrs)

  return f"{lead}{layout.decorations}{attr_text}{method.signature.to_text()} {method.body}"
