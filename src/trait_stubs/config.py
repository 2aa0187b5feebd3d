"""
Runtime Configuration Store.

Settings are read from the `[tool.trait_stubs]` table of the nearest
`pyproject.toml` and may be overridden from the command line.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from trait_stubs.errors import ConfigurationError

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

PLACEHOLDER_MACROS = ("todo", "unimplemented")


class RuntimeConfig(BaseModel):
  """
  Configuration for the file pipeline and renderer.

  The core transform takes only the placeholder macro and the cfg predicate;
  the rest controls how rewritten traits are located and rendered.
  """

  marker: str = Field("test_stubs", description="Attribute marking traits to rewrite (last path segment).")
  cfg_predicate: str = Field("test", description="cfg predicate selecting the test build.")
  placeholder_macro: str = Field("todo", description="Macro used for placeholder bodies.")
  allow_lints: bool = Field(
    True,
    description="Add #[allow(unused_variables)] and #[allow(unreachable_code)] to test variants.",
  )

  @field_validator("placeholder_macro")
  @classmethod
  def validate_macro(cls, v: str) -> str:
    """
    Ensures the macro is one that diverges with a "not implemented" message.

    Raises:
        ValueError: For any other macro name.
    """
    v_clean = v.strip().rstrip("!")
    if v_clean not in PLACEHOLDER_MACROS:
      raise ValueError(f"Unknown placeholder macro: '{v_clean}'. Supported: {list(PLACEHOLDER_MACROS)}")
    return v_clean

  @field_validator("marker", "cfg_predicate")
  @classmethod
  def validate_identifier(cls, v: str) -> str:
    v_clean = v.strip()
    if not v_clean or not v_clean.replace("_", "a").isalnum():
      raise ValueError(f"Expected a Rust identifier, got '{v}'")
    return v_clean

  @property
  def test_selector(self) -> str:
    return f"#[cfg({self.cfg_predicate})]"

  @property
  def not_test_selector(self) -> str:
    return f"#[cfg(not({self.cfg_predicate}))]"

  @classmethod
  def load(
    cls,
    marker: Optional[str] = None,
    cfg_predicate: Optional[str] = None,
    placeholder_macro: Optional[str] = None,
    allow_lints: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        marker (Optional[str]): Override for the marker attribute.
        cfg_predicate (Optional[str]): Override for the cfg predicate.
        placeholder_macro (Optional[str]): Override for the placeholder macro.
        allow_lints (Optional[bool]): Override for lint allowances.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.

    Raises:
        ConfigurationError: If the merged settings do not validate.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    overrides = {
      "marker": marker,
      "cfg_predicate": cfg_predicate,
      "placeholder_macro": placeholder_macro,
      "allow_lints": allow_lints,
    }
    merged: Dict[str, Any] = {k: v for k, v in toml_config.items() if k in cls.model_fields}
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
      return cls(**merged)
    except ValidationError as e:
      raise ConfigurationError(f"Invalid trait_stubs configuration: {e}") from e


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches `start_path` and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.

  Raises:
      ConfigurationError: If the nearest pyproject.toml is not valid TOML.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Cannot parse {toml_path}: {e}") from e
      return data.get("tool", {}).get("trait_stubs", {}), parent

  return {}, None
