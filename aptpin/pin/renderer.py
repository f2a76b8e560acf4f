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

"""Pin validation and rendering for aptpin.

render_pin() turns a PinRequest into the text of an APT preference file and
the Setting directive that places it under preferences.d. Validation always
runs first, so an invalid request never reaches the setting writer.

Validation Rules:

Specific form (packages is not "*"):
    At most one of {release family, origin, version} may be set.

General form (packages is "*"):
    version must not be set, and release family and origin must not both
    be set.

Derived Values:

- pin_release: release, codename, release_version, component, originator
  and label concatenated in that order
- packages_string: package matches joined by single spaces
- file_name: name with every character outside [0-9a-z-_.] (case
  insensitive) replaced by "_"

Example:
    Render a general pin:
        ```python
        from aptpin.pin import PinRequest, render_pin

        rendered = render_pin(
            PinRequest(name="stable-pin", priority=700, release="stable"),
            namespace="myapp",
        )
        print(rendered.content)
        # # This file is managed by aptpin. DO NOT EDIT.
        # Explanation: myapp: stable-pin
        # Package: *
        # Pin: release a=stable
        # Pin-Priority: 700
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from aptpin.exceptions import InvalidParameterError, MutualExclusionError
from aptpin.logging import get_global_logger
from aptpin.pin.request import PIN_TARGET_FIELDS, RELEASE_FIELDS, PinRequest
from aptpin.pin.template import render_header, render_pin_body
from aptpin.setting import Setting

__all__ = [
    "RenderedPin",
    "pin_release",
    "packages_string",
    "sanitize_file_name",
    "resolve_explanation",
    "validate_pin",
    "render_pin",
]

_UNSAFE_FILE_CHARS = re.compile(r"[^0-9a-z\-_.]", re.IGNORECASE)


@dataclass(frozen=True)
class RenderedPin:
    """A validated and rendered pin.

    Attributes:
        name: Pin name from the request.
        file_name: Sanitized base name of the preference file.
        explanation: Resolved explanation text.
        content: Full preference file text (header + pin stanza).
        setting: Directive handed to the setting writer.
    """

    name: str
    file_name: str
    explanation: str
    content: str
    setting: Setting


def pin_release(request: PinRequest) -> str:
    """Concatenate the release-family fields in their fixed order.

    Example:
        >>> pin_release(PinRequest(name="x", codename="bullseye"))
        'bullseye'
    """
    return "".join(getattr(request, field) or "" for field in RELEASE_FIELDS)


def packages_string(packages: str | list[str] | tuple[str, ...]) -> str:
    """Join package matches with single spaces.

    Example:
        >>> packages_string(["nginx", "nginx-common"])
        'nginx nginx-common'
    """
    if isinstance(packages, str):
        return packages
    return " ".join(packages)


def sanitize_file_name(name: str) -> str:
    """Replace every character APT rejects in preference file names with '_'.

    Example:
        >>> sanitize_file_name("my name!@#.list")
        'my_name___.list'
    """
    return _UNSAFE_FILE_CHARS.sub("_", name)


def resolve_explanation(request: PinRequest, namespace: str = "") -> str:
    """Return the explanation, defaulting to '<namespace>: <name>'."""
    if request.explanation is not None:
        return request.explanation
    return f"{namespace}: {request.name}"


def _check_single_line(pin_name: str, field: str, value: object) -> None:
    text = str(value)
    if "\n" in text or "\r" in text:
        raise InvalidParameterError(
            f"pin '{pin_name}': parameter {field} must not contain line breaks"
        )


def _check_rendered_fields(request: PinRequest) -> None:
    """Reject values that would add or break lines of the pin stanza."""
    _check_single_line(request.name, "name", request.name)
    if request.explanation is not None:
        _check_single_line(request.name, "explanation", request.explanation)
    _check_single_line(request.name, "priority", request.priority)
    for field in PIN_TARGET_FIELDS:
        value = getattr(request, field)
        if value:
            _check_single_line(request.name, field, value)

    matches = (
        [request.packages] if isinstance(request.packages, str) else request.packages
    )
    if not matches or any(not match.strip() for match in matches):
        raise InvalidParameterError(
            f"pin '{request.name}': parameter packages must not be empty"
        )
    for match in matches:
        _check_single_line(request.name, "packages", match)


def validate_pin(request: PinRequest) -> None:
    """Check the pin target rules for a request.

    Every rendered field must be a single line and the package match must
    not be empty. Then the target rules apply.

    Args:
        request: Pin request to check.

    Raises:
        MutualExclusionError: If conflicting pin targets are set.
        InvalidParameterError: If version is set for the wildcard package
            match "*", a rendered field contains a line break, or packages
            is empty.
    """
    _check_rendered_fields(request)

    release_set = pin_release(request) != ""
    origin_set = bool(request.origin)
    version_set = bool(request.version)

    if packages_string(request.packages) != "*":
        if (release_set and (origin_set or version_set)) or (
            version_set and (release_set or origin_set)
        ):
            raise MutualExclusionError(
                f"pin '{request.name}': parameters release, origin, and version "
                "are mutually exclusive"
            )
    else:
        if version_set:
            raise InvalidParameterError(
                f"pin '{request.name}': parameter version cannot be used in "
                "general form (packages '*')"
            )
        if release_set and origin_set:
            raise MutualExclusionError(
                f"pin '{request.name}': parameters release and origin are "
                "mutually exclusive"
            )


def render_pin(request: PinRequest, namespace: str = "") -> RenderedPin:
    """Validate a pin request and render its preference file.

    Rendering is deterministic: the same request and namespace always yield
    byte-identical content.

    Args:
        request: Pin request to render.
        namespace: Identity of the caller, used in the default explanation.

    Returns:
        The rendered pin with its Setting directive ("pref-<file_name>",
        the request's ensure and order, notify_update False).

    Raises:
        MutualExclusionError: If conflicting pin targets are set.
        InvalidParameterError: If version is set for packages "*", or a
            rendered field or the namespace contains a line break.
    """
    logger = get_global_logger()

    validate_pin(request)
    _check_single_line(request.name, "namespace", namespace)

    release = pin_release(request)
    explanation = resolve_explanation(request, namespace)
    file_name = sanitize_file_name(request.name)
    targets = {field: getattr(request, field) for field in PIN_TARGET_FIELDS}

    content = render_header() + render_pin_body(
        name=request.name,
        explanation=explanation,
        packages_string=packages_string(request.packages),
        priority=request.priority,
        targets=targets,
        pin_release=release,
    )

    logger.verbose("PIN", f"Rendered pin '{request.name}' -> pref-{file_name}")
    for line in content.splitlines():
        logger.debug("PIN", f"  {line}")

    setting = Setting(
        name=f"pref-{file_name}",
        content=content,
        ensure=request.ensure,
        priority=request.order,
        notify_update=False,
    )
    return RenderedPin(
        name=request.name,
        file_name=file_name,
        explanation=explanation,
        content=content,
        setting=setting,
    )
