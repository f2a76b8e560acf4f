"""
Tests for aptpin.logging module.
"""

from __future__ import annotations

from aptpin.logging import (
    DefaultLogger,
    SilentLogger,
    get_global_logger,
    get_logger,
    set_global_logger,
)


class TestDefaultLogger:
    """Tests for DefaultLogger verbosity handling."""

    def test_step_always_printed(self, capsys):
        """Test step output ignores verbosity."""
        DefaultLogger().step(1, 3, "Loading manifest...")
        assert capsys.readouterr().out == "[1/3] Loading manifest...\n"

    def test_verbose_suppressed_by_default(self, capsys):
        """Test verbose output needs verbose mode."""
        DefaultLogger().verbose("CONFIG", "hidden")
        assert capsys.readouterr().out == ""

    def test_debug_implies_verbose(self, capsys):
        """Test debug mode enables verbose output."""
        logger = DefaultLogger(debug=True)
        logger.verbose("CONFIG", "shown")
        logger.debug("PIN", "also shown")
        assert capsys.readouterr().out == "[CONFIG] shown\n[PIN] also shown\n"

    def test_warning_always_printed(self, capsys):
        """Test warnings ignore verbosity."""
        DefaultLogger().warning("CONFIG", "careful")
        assert capsys.readouterr().out == "[WARNING] [CONFIG] careful\n"


class TestGlobalLogger:
    """Tests for the global logger helpers."""

    def test_default_is_silent(self):
        """Test the global logger starts silent."""
        assert isinstance(get_global_logger(), SilentLogger)

    def test_set_global_logger(self):
        """Test the global logger can be replaced."""
        logger = get_logger(verbose=True)
        set_global_logger(logger)
        assert get_global_logger() is logger
