"""Unit tests for AudiobookshelfConfig resolution."""

import pytest

from audiobookshelf.exceptions import ConfigurationError
from audiobookshelf.models import AudiobookshelfConfig

ENV = {"ABS_BASE_URL": "https://env.example.com", "ABS_API_KEY": "env-token"}


class TestResolve:
    """Precedence between per-call arguments and the environment."""

    def test_arguments_override_environment(self):
        config = AudiobookshelfConfig.resolve(
            "https://abs.example.com", "call-token", environ=ENV
        )

        assert config.base_url == "https://abs.example.com/api"
        assert config.token == "call-token"

    def test_environment_fallback(self):
        config = AudiobookshelfConfig.resolve(environ=ENV)

        assert config.base_url == "https://env.example.com/api"
        assert config.token == "env-token"

    def test_empty_argument_counts_as_absent(self):
        config = AudiobookshelfConfig.resolve("", "", environ=ENV)

        assert config.base_url == "https://env.example.com/api"
        assert config.token == "env-token"

    def test_each_field_falls_back_independently(self):
        config = AudiobookshelfConfig.resolve(token="call-token", environ=ENV)

        assert config.base_url == "https://env.example.com/api"
        assert config.token == "call-token"

    def test_reads_os_environ_by_default(self, abs_env):
        config = AudiobookshelfConfig.resolve()

        assert config.base_url == "https://abs.example.com/api"
        assert config.token == "env-token"


class TestApiRoot:
    """The /api root is appended for resource endpoints only."""

    def test_root_level_skips_api_suffix(self):
        config = AudiobookshelfConfig.resolve(environ=ENV, root_level=True)

        assert config.base_url == "https://env.example.com"

    def test_trailing_slash_is_trimmed_before_suffix(self):
        config = AudiobookshelfConfig.resolve("https://abs.example.com/", "t", environ={})

        assert config.base_url == "https://abs.example.com/api"


class TestMissingConfiguration:
    """Resolution fails closed when a field is missing."""

    def test_missing_base_url(self):
        with pytest.raises(ConfigurationError) as exc_info:
            AudiobookshelfConfig.resolve(token="t", environ={})

        assert exc_info.value.field == "base_url"
        assert "ABS_BASE_URL" in str(exc_info.value)

    def test_missing_token(self):
        with pytest.raises(ConfigurationError) as exc_info:
            AudiobookshelfConfig.resolve("https://abs.example.com", environ={})

        assert exc_info.value.field == "token"
        assert "ABS_API_KEY" in str(exc_info.value)

    def test_base_url_reported_first_when_both_missing(self, no_abs_env):
        with pytest.raises(ConfigurationError) as exc_info:
            AudiobookshelfConfig.resolve()

        assert exc_info.value.field == "base_url"
