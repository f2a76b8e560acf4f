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

"""Public API return types for aptpin.

This module defines dataclasses for return values from public API functions.
These types represent the results of operations like validating a manifest,
converging a setting file and applying a whole manifest.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from pathlib import Path
        from aptpin.core import apply_manifest

        result = apply_manifest(Path("pins.yaml"), dry_run=True)
        for setting in result.settings:
            print(setting.path, setting.action)
        ```

Note:
    Only public API return types belong in this module. Domain types
    (like PinRequest and RenderedPin) remain co-located with their related
    logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

SettingAction = Literal["created", "updated", "unchanged", "removed", "absent"]


@dataclass(frozen=True)
class SettingResult:
    """Result from converging one setting file.

    Attributes:
        name: Setting name (e.g., "pref-nginx").
        path: Path of the managed file.
        action: What was done (or, in dry-run mode, what would be done).
        changed: True if the file was (or would be) written or removed.
        notify_update: True if the change calls for a package index refresh.
    """

    name: str
    path: Path
    action: SettingAction
    changed: bool
    notify_update: bool


@dataclass(frozen=True)
class ApplyResult:
    """Result from applying a manifest.

    Attributes:
        manifest_path: Path to the applied manifest.
        confdir: APT configuration directory the settings were applied to.
        settings: One result per pin, in manifest order.
        purged: Unmanaged files removed from preferences.d.
        dry_run: True if nothing was written.
    """

    manifest_path: Path
    confdir: Path
    settings: list[SettingResult]
    purged: list[Path] = field(default_factory=list)
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        """True if any file was (or would be) written or removed."""
        return bool(self.purged) or any(s.changed for s in self.settings)


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a manifest.

    Attributes:
        status: Validation status ("valid" or "invalid").
        errors: List of error messages (empty if valid).
        warnings: List of warning messages.
        pin_count: Number of pins in the manifest.
        manifest_path: String path to the validated manifest.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    pin_count: int
    manifest_path: str
