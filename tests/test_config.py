"""
Tests for Runtime Configuration loading.
"""

import pytest
from trait_stubs.config import RuntimeConfig
from trait_stubs.errors import ConfigurationError


def test_defaults():
  config = RuntimeConfig()
  assert config.marker == "test_stubs"
  assert config.cfg_predicate == "test"
  assert config.placeholder_macro == "todo"
  assert config.allow_lints is True
  assert config.test_selector == "#[cfg(test)]"
  assert config.not_test_selector == "#[cfg(not(test))]"


def test_macro_validation():
  assert RuntimeConfig(placeholder_macro="unimplemented!").placeholder_macro == "unimplemented"
  with pytest.raises(ValueError):
    RuntimeConfig(placeholder_macro="panic")


def test_identifier_validation():
  with pytest.raises(ValueError):
    RuntimeConfig(cfg_predicate="not(test)")


def test_load_from_pyproject(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    '[tool.trait_stubs]\ncfg_predicate = "mocks"\nallow_lints = false\nunrelated = 1\n',
    encoding="utf-8",
  )
  nested = tmp_path / "crate" / "src"
  nested.mkdir(parents=True)

  config = RuntimeConfig.load(search_path=nested)
  assert config.cfg_predicate == "mocks"
  assert config.allow_lints is False
  assert config.marker == "test_stubs"


def test_cli_overrides_toml(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[tool.trait_stubs]\nplaceholder_macro = "unimplemented"\n', encoding="utf-8")
  config = RuntimeConfig.load(placeholder_macro="todo", allow_lints=False, search_path=tmp_path)
  assert config.placeholder_macro == "todo"
  assert config.allow_lints is False


def test_invalid_toml_values(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[tool.trait_stubs]\nplaceholder_macro = "panic"\n', encoding="utf-8")
  with pytest.raises(ConfigurationError):
    RuntimeConfig.load(search_path=tmp_path)


def test_broken_toml(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.trait_stubs\n", encoding="utf-8")
  with pytest.raises(ConfigurationError):
    RuntimeConfig.load(search_path=tmp_path)
