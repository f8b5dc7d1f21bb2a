"""
Tests for Parser Configuration
==============================

These tests verify ParserOptions defaults and loading from environment
variables.
"""

import logging

import pytest

from carbon_parser import ParserOptions
from carbon_parser.config import DEFAULT_MAX_DEPTH


@pytest.fixture
def clean_env(monkeypatch):
    """Remove parser environment variables for the duration of a test."""
    monkeypatch.delenv("CARBON_PARSER_MAX_DEPTH", raising=False)
    monkeypatch.delenv("CARBON_PARSER_FILENAME", raising=False)
    return monkeypatch


class TestParserOptions:
    """Tests for ParserOptions."""

    def test_defaults(self):
        options = ParserOptions()
        assert options.filename == "<input>"
        assert options.max_depth == DEFAULT_MAX_DEPTH == 64

    def test_from_env_defaults(self, clean_env):
        assert ParserOptions.from_env() == ParserOptions()

    def test_from_env_max_depth(self, clean_env):
        clean_env.setenv("CARBON_PARSER_MAX_DEPTH", "128")
        assert ParserOptions.from_env().max_depth == 128

    def test_from_env_filename(self, clean_env):
        clean_env.setenv("CARBON_PARSER_FILENAME", "stdin.carbon")
        assert ParserOptions.from_env().filename == "stdin.carbon"

    def test_invalid_max_depth_ignored(self, clean_env, caplog):
        """Invalid values keep the default and log a warning."""
        clean_env.setenv("CARBON_PARSER_MAX_DEPTH", "deep")
        with caplog.at_level(logging.WARNING, logger="carbon_parser.config"):
            options = ParserOptions.from_env()
        assert options.max_depth == DEFAULT_MAX_DEPTH
        assert "CARBON_PARSER_MAX_DEPTH='deep'" in caplog.text

    def test_empty_values_ignored(self, clean_env):
        clean_env.setenv("CARBON_PARSER_MAX_DEPTH", "")
        clean_env.setenv("CARBON_PARSER_FILENAME", "")
        assert ParserOptions.from_env() == ParserOptions()
