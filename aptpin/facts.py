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

"""System facts for aptpin.

This module provides a small fact registry. Each fact has a name, a
confinement (the OS family it applies to) and a zero-argument resolver.
collect_facts() detects the OS family once and resolves only the facts
whose confinement matches; facts confined to another family are left out
of the result entirely rather than reported as False.

Registered Facts:

- apt_reboot_required (Debian): True when /var/run/reboot-required exists.
  Package maintainer scripts create that file when an upgrade needs a
  reboot to take effect.

Example:
    Collect the facts for this host:
        ```python
        from aptpin.facts import collect_facts

        facts = collect_facts()
        if facts.get("apt_reboot_required"):
            print("Reboot required")
        ```

    Register a custom fact:
        ```python
        from aptpin.facts import register_fact

        register_fact("apt_proxy_configured", "Debian",
                      lambda: Path("/etc/apt/apt.conf.d/01proxy").exists())
        ```
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from aptpin.exceptions import ConfigError
from aptpin.logging import get_global_logger

__all__ = [
    "REBOOT_REQUIRED_SENTINEL",
    "Fact",
    "register_fact",
    "get_fact",
    "detect_os_family",
    "is_reboot_required",
    "collect_facts",
]

REBOOT_REQUIRED_SENTINEL = Path("/var/run/reboot-required")
OS_RELEASE = Path("/etc/os-release")

# os-release ID / ID_LIKE value -> OS family
_OS_FAMILIES: dict[str, str] = {
    "debian": "Debian",
    "ubuntu": "Debian",
    "rhel": "RedHat",
    "fedora": "RedHat",
    "centos": "RedHat",
    "suse": "Suse",
    "opensuse": "Suse",
    "arch": "Archlinux",
}


@dataclass(frozen=True)
class Fact:
    """A named fact confined to one OS family.

    Attributes:
        name: Fact name as reported by collect_facts().
        os_family: OS family the fact applies to (e.g., "Debian").
        resolve: Zero-argument callable returning the fact value.
    """

    name: str
    os_family: str
    resolve: Callable[[], Any]


_FACT_REGISTRY: dict[str, Fact] = {}


def register_fact(name: str, os_family: str, resolve: Callable[[], Any]) -> None:
    """Register a fact by name in the global registry.

    Registering the same name twice overwrites the previous registration
    (allows monkey-patching for tests).

    Args:
        name: Fact name (lowercase with underscores).
        os_family: OS family the fact is confined to.
        resolve: Zero-argument callable computing the value.
    """
    _FACT_REGISTRY[name] = Fact(name=name, os_family=os_family, resolve=resolve)


def get_fact(name: str) -> Fact:
    """Get a registered fact by name.

    Raises:
        ConfigError: If no fact with that name is registered.
    """
    if name not in _FACT_REGISTRY:
        available = ", ".join(sorted(_FACT_REGISTRY.keys()))
        raise ConfigError(f"Unknown fact: {name!r}. Available facts: {available}")
    return _FACT_REGISTRY[name]


def _parse_os_release(text: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        values[key.strip()] = value.strip().strip("\"'")
    return values


def detect_os_family(os_release: Path = OS_RELEASE) -> str | None:
    """Detect the OS family from an os-release file.

    ID is checked before the entries of ID_LIKE, so Ubuntu (ID=ubuntu,
    ID_LIKE=debian) and Debian derivatives both map to "Debian".

    Args:
        os_release: Path to the os-release file.

    Returns:
        The OS family name, the capitalized ID for unknown distributions,
        or None if the file cannot be read or has no ID.
    """
    try:
        values = _parse_os_release(os_release.read_text(encoding="utf-8"))
    except OSError:
        return None

    os_id = values.get("ID", "").lower()
    candidates = [os_id] + values.get("ID_LIKE", "").lower().split()
    for candidate in candidates:
        if candidate in _OS_FAMILIES:
            return _OS_FAMILIES[candidate]
    return os_id.capitalize() or None


def is_reboot_required(sentinel: Path = REBOOT_REQUIRED_SENTINEL) -> bool:
    """Return True if the reboot-required sentinel file exists.

    The probe is best-effort: any error while checking the file counts as
    the file not existing.
    """
    try:
        return sentinel.is_file()
    except OSError:
        return False


def collect_facts(os_family: str | None = None) -> dict[str, Any]:
    """Resolve every registered fact confined to the host's OS family.

    Args:
        os_family: OS family to collect for. Detected from /etc/os-release
            when None.

    Returns:
        Mapping of fact name to value. Facts confined to another family are
        absent, and their resolvers are never called.
    """
    logger = get_global_logger()

    if os_family is None:
        os_family = detect_os_family()
    logger.verbose("FACTS", f"OS family: {os_family or 'unknown'}")

    facts: dict[str, Any] = {}
    for name, fact in sorted(_FACT_REGISTRY.items()):
        if fact.os_family != os_family:
            logger.debug("FACTS", f"Skipping {name} (confined to {fact.os_family})")
            continue
        facts[name] = fact.resolve()
        logger.debug("FACTS", f"{name} = {facts[name]}")
    return facts


def _apt_reboot_required() -> bool:
    # Looked up at call time so the sentinel path can be patched
    return is_reboot_required(REBOOT_REQUIRED_SENTINEL)


register_fact("apt_reboot_required", "Debian", _apt_reboot_required)
