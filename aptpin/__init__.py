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

"""aptpin - APT pin management

A Python-based CLI tool for managing APT package pinning files and reporting
whether a Debian-family host needs a reboot.

aptpin provides:

- YAML-based pin manifests with layered defaults
- Validation of pin targets (release, origin, version) before any write
- Deterministic rendering of preferences.d files
- Idempotent file convergence (writes only when content changes)
- Optional purge of unmanaged preference files
- An OS-family confined apt_reboot_required fact

Quick Start:
Validate a manifest:

    $ aptpin validate manifests/pins.yaml

Preview and apply:

    $ aptpin apply manifests/pins.yaml --dry-run
    $ aptpin apply manifests/pins.yaml

Check whether a reboot is required:

    $ aptpin facts

Public API:

    from aptpin.pin import PinRequest, render_pin
    from aptpin.core import apply_manifest, render_manifest
    from aptpin.validation import validate_manifest
    from aptpin.facts import collect_facts, is_reboot_required

For more details, see the individual module docstrings.
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "aptpin - APT pin preference management"

from aptpin.core import apply_manifest, render_manifest
from aptpin.facts import collect_facts, is_reboot_required
from aptpin.pin import PinRequest, RenderedPin, render_pin
from aptpin.validation import validate_manifest

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "PinRequest",
    "RenderedPin",
    "apply_manifest",
    "collect_facts",
    "is_reboot_required",
    "render_manifest",
    "render_pin",
    "validate_manifest",
]
