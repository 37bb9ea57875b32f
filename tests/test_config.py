# =============================================================================
# test_config.py - Column Configuration Tests
# =============================================================================
# Tests for IndentConfig: defaults, tuple behaviour, parsing and the
# environment override.
# =============================================================================

import pytest
from dsp56k_fmt.config import ENV_COLUMNS, IndentConfig
from dsp56k_fmt.errors import ConfigError


class TestDefaults:
    """Test the default layout."""

    def test_default_columns(self):
        assert tuple(IndentConfig()) == (4, 14, 24, 37, 50, 80)

    def test_indexing(self):
        config = IndentConfig()
        assert config[0] == 4
        assert config[4] == 50
        assert len(config) == 6

    def test_named_fields(self):
        config = IndentConfig()
        assert config.instruction_column == 4
        assert config.line_width == 80

    def test_str(self):
        assert str(IndentConfig()) == "4,14,24,37,50,80"

    def test_frozen(self):
        config = IndentConfig()
        with pytest.raises(AttributeError):
            config.args_column = 20


class TestParsing:
    """Test column spec parsing."""

    def test_parse_commas(self):
        assert tuple(IndentConfig.parse("8,16,28,42,56,100")) == (8, 16, 28, 42, 56, 100)

    def test_parse_spaces(self):
        assert tuple(IndentConfig.parse(" 8 16, 28 42 56 100 ")) == (8, 16, 28, 42, 56, 100)

    def test_wrong_count(self):
        with pytest.raises(ConfigError, match="expected 6 columns"):
            IndentConfig.parse("4,14,24")

    def test_non_integer(self):
        with pytest.raises(ConfigError, match="integers"):
            IndentConfig.parse("4,14,24,37,fifty,80")

    def test_negative(self):
        with pytest.raises(ConfigError, match="must not be negative"):
            IndentConfig(-1, 14, 24, 37, 50, 80)

    def test_from_sequence(self):
        assert IndentConfig.from_sequence([4, 14, 24, 37, 50, 80]) == IndentConfig()


class TestEnvironment:
    """Test DSPFMT_COLUMNS."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv(ENV_COLUMNS, "2,10,20,30,40,72")
        assert tuple(IndentConfig.from_env()) == (2, 10, 20, 30, 40, 72)

    def test_invalid_env_ignored(self, monkeypatch):
        monkeypatch.setenv(ENV_COLUMNS, "nonsense")
        assert IndentConfig.from_env() == IndentConfig()

    def test_unset_env(self, monkeypatch):
        monkeypatch.delenv(ENV_COLUMNS, raising=False)
        assert IndentConfig.from_env() == IndentConfig()
