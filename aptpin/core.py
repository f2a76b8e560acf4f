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

"""Core orchestration for aptpin.

This module provides high-level functions that coordinate the complete
workflow: load a manifest, render every pin, and converge the preference
files on disk.

Design Principles:

- Render everything before writing anything: a single invalid pin aborts
  the run with no partial writes
- Each function has a single, clear responsibility
- Functions return structured data (dataclasses) for easy testing
- Error handling uses exceptions; the CLI layer formats them for display

Example:
    Programmatic usage:
        ```python
        from pathlib import Path
        from aptpin.core import apply_manifest

        result = apply_manifest(Path("manifests/pins.yaml"), dry_run=True)
        for setting in result.settings:
            print(f"{setting.path}: {setting.action}")
        ```

"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from aptpin.config import load_effective_config
from aptpin.exceptions import ConfigError
from aptpin.logging import get_global_logger
from aptpin.pin import RenderedPin, pin_request_from_config, render_pin
from aptpin.results import ApplyResult, SettingResult
from aptpin.setting import DEFAULT_CONFDIR, apply_setting, purge_unmanaged
from aptpin.setting.writer import SETTING_TYPES
from aptpin.validation import check_manifest_fields

__all__ = ["render_manifest", "apply_manifest"]


def _render_config(config: dict[str, Any]) -> list[RenderedPin]:
    errors = check_manifest_fields(config)
    if errors:
        raise ConfigError("; ".join(errors))

    namespace = config.get("namespace", "")
    defaults = config.get("defaults", {})

    pins = config.get("pins")
    if not isinstance(pins, list) or not pins:
        raise ConfigError("Field 'pins' must be a non-empty list")

    rendered: list[RenderedPin] = []
    seen: dict[str, str] = {}
    for pin in pins:
        result = render_pin(pin_request_from_config(pin, defaults), namespace)
        if result.file_name in seen:
            raise ConfigError(
                f"pins '{seen[result.file_name]}' and '{result.name}' both render "
                f"to file name '{result.file_name}'"
            )
        seen[result.file_name] = result.name
        rendered.append(result)
    return rendered


def render_manifest(manifest_path: Path) -> list[RenderedPin]:
    """Load a manifest and render every pin in it.

    Args:
        manifest_path: Path to the manifest YAML file.

    Returns:
        Rendered pins in manifest order.

    Raises:
        ConfigError: If the manifest cannot be loaded, a pin entry is
            invalid, or two pins share a file name.
        MutualExclusionError: If a pin sets conflicting targets.
        InvalidParameterError: If a pin uses version with packages "*".
    """
    config = load_effective_config(manifest_path)
    return _render_config(config)


def apply_manifest(
    manifest_path: Path,
    confdir: Path | None = None,
    *,
    dry_run: bool = False,
) -> ApplyResult:
    """Render every pin of a manifest and converge the files on disk.

    Steps:

    1. Load the effective configuration
    2. Render all pins (validation failures abort before any write)
    3. Apply each pin's setting (idempotent, SHA-256 comparison)
    4. Purge unmanaged preferences.d files if the manifest sets
       'purge: true'

    Args:
        manifest_path: Path to the manifest YAML file.
        confdir: APT configuration directory. Overrides the manifest's
            'confdir'; defaults to /etc/apt.
        dry_run: If True, report what would change without writing.

    Returns:
        Per-pin setting results and the list of purged files.

    Raises:
        ConfigError: If the manifest or a pin entry is invalid.
        PinValidationError: If a pin violates the pin target rules.
        SettingError: If a file cannot be written or removed.
    """
    logger = get_global_logger()

    logger.step(1, 3, "Loading manifest...")
    config = load_effective_config(manifest_path)

    logger.step(2, 3, "Rendering pins...")
    rendered = _render_config(config)

    if confdir is None:
        confdir = Path(config.get("confdir") or DEFAULT_CONFDIR)
    purge = config.get("purge", False)
    logger.verbose("APPLY", f"Rendered {len(rendered)} pin(s)")

    logger.step(3, 3, f"Applying settings to {confdir}...")
    results: list[SettingResult] = []
    for pin in rendered:
        results.append(apply_setting(pin.setting, confdir, dry_run=dry_run))

    purged: list[Path] = []
    if purge:
        keep = {r.path for r in results if r.action not in ("removed", "absent")}
        purged = purge_unmanaged(
            confdir / SETTING_TYPES["pref"][0], keep, dry_run=dry_run
        )

    changed = sum(1 for r in results if r.changed)
    logger.verbose(
        "APPLY",
        f"{changed} setting(s) changed, {len(purged)} file(s) purged"
        + (" (dry run)" if dry_run else ""),
    )

    return ApplyResult(
        manifest_path=manifest_path,
        confdir=confdir,
        settings=results,
        purged=purged,
        dry_run=dry_run,
    )
