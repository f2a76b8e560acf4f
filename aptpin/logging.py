# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Console output for aptpin.

Library code never prints directly. It asks get_global_logger() for the
current logger and reports through it; the CLI installs a DefaultLogger
that matches the command's -v/-d flags, and everything else (tests,
programmatic callers) gets a SilentLogger.

What each kind of message is used for:

| kind    | shown when      | used for                                        |
|---------|-----------------|-------------------------------------------------|
| step    | always          | "[1/3] Loading manifest..." progress of apply   |
| warning | always          | ignored defaults files, other recoverable input |
| verbose | -v or -d        | files loaded, pins rendered, files written      |
| debug   | -d              | merged YAML, rendered stanza lines, SHA-256     |

Prefixes name the component speaking: CONFIG (manifest loading), PIN
(rendering), SETTING (file writer), APPLY, VALIDATE and FACTS.

Example:
    Show file writes while applying a manifest:
        ```python
        from pathlib import Path
        from aptpin.core import apply_manifest
        from aptpin.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        apply_manifest(Path("manifests/pins.yaml"), dry_run=True)
        # [SETTING] Writing: /etc/apt/preferences.d/50-nginx.pref
        ```
"""

from __future__ import annotations

from typing import Protocol


class Logger(Protocol):
    """What aptpin modules expect from a logger.

    Anything with these four methods can be installed with
    set_global_logger(), e.g. a test double that records messages.
    """

    def step(self, step: int, total: int, message: str) -> None:
        """Report progress through a fixed number of steps (apply uses 3).

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Report what aptpin is doing to which file or pin.

        Args:
            prefix: Component name (e.g., "CONFIG", "SETTING").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Report raw data: merged YAML, stanza lines, hashes.

        Args:
            prefix: Component name (e.g., "PIN", "FACTS").
            message: Log message.
        """
        ...

    def warning(self, prefix: str, message: str) -> None:
        """Report input that was skipped rather than rejected.

        Args:
            prefix: Component name (e.g., "CONFIG").
            message: Warning text.
        """
        ...


class DefaultLogger:
    """Logger installed by the CLI; prints to stdout.

    Lines look like "[1/3] message", "[PREFIX] message" or
    "[WARNING] [PREFIX] message", next to the CLI's own result banners.
    """

    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        self._verbose = verbose or debug
        self._debug = debug

    def step(self, step: int, total: int, message: str) -> None:
        print(f"[{step}/{total}] {message}")

    def verbose(self, prefix: str, message: str) -> None:
        if self._verbose:
            print(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        if self._debug:
            print(f"[{prefix}] {message}")

    def warning(self, prefix: str, message: str) -> None:
        print(f"[WARNING] [{prefix}] {message}")


class SilentLogger:
    """Logger that drops everything. The global default."""

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass

    def warning(self, prefix: str, message: str) -> None:
        pass


# Global logger instance (defaults to silent)
_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Build a stdout logger for the CLI's -v and -d flags."""
    return DefaultLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    """Return the logger aptpin modules report through (silent by default)."""
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Install the logger every aptpin module reports through.

    The CLI calls this once per command; tests reset it to SilentLogger.
    """
    global _global_logger
    _global_logger = logger
