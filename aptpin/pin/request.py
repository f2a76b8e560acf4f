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

"""Pin request model for aptpin.

A PinRequest describes a single APT pin: which packages it matches, what it
pins them to (a release, an origin or a version) and with which priority.
Requests are immutable; one is built per pin and consumed once by
render_pin().

Pin Targets:

- Release family: release (a=), codename (n=), release_version (v=),
  component (c=), originator (o=), label (l=)
- origin: pin by the hostname of the archive
- version: pin by package version (specific package matches only)

A target counts as set when it is a non-empty string; None and "" are
both treated as unset. Targets must be written as strings: a YAML number
such as 8.10 has already lost its text (8.1) by the time it is read.

Example:
    Build a request from a manifest entry:
        ```python
        from aptpin.pin.request import pin_request_from_config

        request = pin_request_from_config(
            {"name": "nginx", "packages": ["nginx"], "origin": "nginx.org"},
            defaults={"priority": 900},
        )
        ```
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields
from typing import Any, Literal

from aptpin.exceptions import ConfigError
from aptpin.setting.writer import MAX_PRIORITY

__all__ = [
    "ENSURE_VALUES",
    "PIN_TARGET_FIELDS",
    "Ensure",
    "PinRequest",
    "pin_request_from_config",
]

Ensure = Literal["file", "present", "absent"]

ENSURE_VALUES: tuple[str, ...] = ("file", "present", "absent")

# Order matters: it is the concatenation order of the release family.
RELEASE_FIELDS: tuple[str, ...] = (
    "release",
    "codename",
    "release_version",
    "component",
    "originator",
    "label",
)

PIN_TARGET_FIELDS: tuple[str, ...] = RELEASE_FIELDS + ("origin", "version")


@dataclass(frozen=True)
class PinRequest:
    """Parameters describing a single APT pin.

    Attributes:
        name: Identifier of the pin. Used in the default explanation and,
            sanitized, as the base of the preference file name.
        ensure: Whether the pin file should exist ("file" or "present") or
            be removed ("absent").
        explanation: Free-form comment written to the Explanation: line.
            Defaults to "<namespace>: <name>" when None.
        order: Load order among preference files, from 0 to 99.
        packages: A single package match or a sequence of package matches.
            "*" selects the general form of the pin.
        priority: Pin-Priority value, as an integer or a string.
        release: Archive name (a=).
        origin: Archive hostname.
        version: Package version pattern.
        codename: Distribution codename (n=).
        release_version: Release version (v=).
        component: Archive component (c=).
        originator: Release originator (o=).
        label: Release label (l=).
    """

    name: str
    ensure: Ensure = "present"
    explanation: str | None = None
    order: int = 50
    packages: str | Sequence[str] = "*"
    priority: int | str = 0
    release: str | None = None
    origin: str | None = None
    version: str | None = None
    codename: str | None = None
    release_version: str | None = None
    component: str | None = None
    originator: str | None = None
    label: str | None = None


_REQUEST_FIELDS = frozenset(f.name for f in fields(PinRequest))


def _package_matches(packages: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(packages, str):
        return (packages,)
    return tuple(packages)


def _as_optional_str(pin_name: str, key: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # 8.10 loads as 8.1 and 010 as 8, so the text is already lost
        raise ConfigError(
            f"pin '{pin_name}': field '{key}' must be a string, got the number "
            f"{value!r}; quote it in the manifest (e.g. {key}: \"{value}\")"
        )
    raise ConfigError(f"pin '{pin_name}': field '{key}' must be a string")


def pin_request_from_config(
    pin: Mapping[str, Any], defaults: Mapping[str, Any] | None = None
) -> PinRequest:
    """Build a PinRequest from a manifest pin entry.

    Values from 'defaults' apply to every key the pin does not set itself.

    Args:
        pin: Mapping from the manifest's 'pins' list.
        defaults: Optional manifest-level defaults (e.g., order, priority).

    Returns:
        The immutable pin request.

    Raises:
        ConfigError: If the entry is not a mapping, has unknown keys, lacks a
            name, or carries an invalid ensure, order, packages or priority.
    """
    if not isinstance(pin, Mapping):
        raise ConfigError(f"pin entry must be a mapping, got {type(pin).__name__}")

    merged: dict[str, Any] = {**(defaults or {}), **pin}

    unknown = sorted(set(merged) - _REQUEST_FIELDS)
    if unknown:
        raise ConfigError(
            f"pin '{merged.get('name', '?')}': unknown field(s): {', '.join(unknown)}"
        )

    name = merged.get("name")
    if not isinstance(name, str) or not name:
        raise ConfigError("pin is missing required field: name")

    ensure = merged.get("ensure", "present")
    if ensure not in ENSURE_VALUES:
        raise ConfigError(
            f"pin '{name}': ensure must be one of {', '.join(ENSURE_VALUES)}, "
            f"got {ensure!r}"
        )

    order = merged.get("order", 50)
    if (
        isinstance(order, bool)
        or not isinstance(order, int)
        or not 0 <= order <= MAX_PRIORITY
    ):
        raise ConfigError(
            f"pin '{name}': order must be an integer from 0 to {MAX_PRIORITY}, "
            f"got {order!r}"
        )

    packages = merged.get("packages", "*")
    if isinstance(packages, str):
        pass
    elif isinstance(packages, list) and all(isinstance(p, str) for p in packages):
        packages = tuple(packages)
    else:
        raise ConfigError(
            f"pin '{name}': packages must be a string or a list of strings"
        )
    if not packages or any(not p.strip() for p in _package_matches(packages)):
        raise ConfigError(f"pin '{name}': packages must not be empty")

    priority = merged.get("priority", 0)
    if isinstance(priority, bool) or not isinstance(priority, (int, str)):
        raise ConfigError(
            f"pin '{name}': priority must be an integer or a string, got {priority!r}"
        )

    explanation = merged.get("explanation")
    if explanation is not None and not isinstance(explanation, str):
        raise ConfigError(f"pin '{name}': explanation must be a string")

    targets = {
        key: _as_optional_str(name, key, merged.get(key)) for key in PIN_TARGET_FIELDS
    }

    return PinRequest(
        name=name,
        ensure=ensure,
        explanation=explanation,
        order=order,
        packages=packages,
        priority=priority,
        **targets,
    )
