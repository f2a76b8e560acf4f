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

"""Preference file templates for aptpin.

This module renders the text of an APT preference file: a shared header
written at the top of every managed file, followed by a single pin stanza
in APT's RFC-822-like preferences syntax.

Private Helpers:
    - _format_release_pin: Build the "release a=..., n=..." pin expression
    - _format_pin: Choose between release, version, origin and default pins

Example:
    from aptpin.pin.template import render_header, render_pin_body

    text = render_header() + render_pin_body(
        name="stable-pin",
        explanation=": stable-pin",
        packages_string="*",
        priority=700,
        targets={"release": "stable"},
        pin_release="stable",
    )
"""

from __future__ import annotations

from collections.abc import Mapping

HEADER = "# This file is managed by aptpin. DO NOT EDIT.\n"

# Pin field -> APT release keyword, in the order they appear on the Pin: line
_RELEASE_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("release", "a"),
    ("codename", "n"),
    ("release_version", "v"),
    ("component", "c"),
    ("originator", "o"),
    ("label", "l"),
)


def _format_release_pin(targets: Mapping[str, str | None]) -> str:
    """Build a release pin expression from the set release-family fields.

    Example:
        >>> _format_release_pin({"release": "stable", "label": "Debian"})
        'release a=stable, l=Debian'
    """
    options = [
        f"{keyword}={targets[field]}"
        for field, keyword in _RELEASE_KEYWORDS
        if targets.get(field)
    ]
    return "release " + ", ".join(options)


def _format_pin(
    name: str, pin_release: str, targets: Mapping[str, str | None]
) -> str:
    """Return the expression written after 'Pin:'.

    Release-family fields win over version, which wins over origin. With
    no target at all the pin falls back to the archive named after the pin.
    """
    if pin_release:
        return _format_release_pin(targets)
    if targets.get("version"):
        return f"version {targets['version']}"
    if targets.get("origin"):
        return f"origin {targets['origin']}"
    return f"release a={name}"


def render_header() -> str:
    """Return the header shared by every file aptpin manages."""
    return HEADER


def render_pin_body(
    name: str,
    explanation: str,
    packages_string: str,
    priority: int | str,
    targets: Mapping[str, str | None],
    pin_release: str,
) -> str:
    """Render the pin stanza.

    Args:
        name: Pin name (used by the default release pin).
        explanation: Resolved explanation text.
        packages_string: Space-joined package matches.
        priority: Pin-Priority value.
        targets: Pin target fields (release family, origin, version).
        pin_release: Concatenated release-family fields.

    Returns:
        The stanza text, newline terminated.
    """
    lines = [
        f"Explanation: {explanation}",
        f"Package: {packages_string}",
        f"Pin: {_format_pin(name, pin_release, targets)}",
        f"Pin-Priority: {priority}",
    ]
    return "\n".join(lines) + "\n"
