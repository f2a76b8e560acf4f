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

"""APT pin rendering for aptpin.

This package validates pin requests and renders them into APT preference
files.

Public API:

- PinRequest: Immutable description of one pin
- pin_request_from_config: Build a PinRequest from a manifest entry
- validate_pin: Check the pin target rules
- render_pin: Validate and render a pin into a RenderedPin
- RenderedPin: Rendered text plus the Setting directive

"""

from .renderer import (
    RenderedPin,
    packages_string,
    pin_release,
    render_pin,
    resolve_explanation,
    sanitize_file_name,
    validate_pin,
)
from .request import PinRequest, pin_request_from_config

__all__ = [
    "PinRequest",
    "RenderedPin",
    "packages_string",
    "pin_release",
    "pin_request_from_config",
    "render_pin",
    "resolve_explanation",
    "sanitize_file_name",
    "validate_pin",
]
