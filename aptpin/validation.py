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

"""Manifest validation module.

This module checks a pin manifest without writing anything to disk. This is
useful for quick feedback while editing manifests and in CI/CD pipelines.

Validation Checks:

- Manifest (and any defaults) load and parse as YAML mappings
- apiVersion is present and supported
- 'pins' is a non-empty list
- Every pin builds a valid PinRequest (known fields, name, ensure, order,
  packages, priority)
- Every pin passes the pin target rules (mutual exclusion, no version in
  general form)
- No two pins render to the same file name

Errors are collected for every pin rather than stopping at the first one.

Example:
    Validate a manifest and handle results:
        ```python
        from pathlib import Path
        from aptpin.validation import validate_manifest

        result = validate_manifest(Path("manifests/pins.yaml"))
        if result.status == "valid":
            print(f"Manifest is valid with {result.pin_count} pin(s)")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from aptpin.config import load_effective_config
from aptpin.exceptions import ConfigError
from aptpin.logging import get_global_logger
from aptpin.pin import pin_request_from_config, sanitize_file_name, validate_pin
from aptpin.results import ValidationResult

__all__ = ["API_VERSION", "check_manifest_fields", "validate_manifest"]

API_VERSION = "aptpin/v1"


def check_manifest_fields(config: dict[str, Any]) -> list[str]:
    """Check the top-level manifest fields other than apiVersion and pins.

    Used by validate_manifest() and by render_manifest() and
    apply_manifest().

    Args:
        config: Effective (merged) configuration.

    Returns:
        Error messages, empty when every field is valid.
    """
    errors: list[str] = []

    namespace = config.get("namespace", "")
    if not isinstance(namespace, str):
        errors.append("Field 'namespace' must be a string")
    elif "\n" in namespace or "\r" in namespace:
        errors.append("Field 'namespace' must not contain line breaks")

    if not isinstance(config.get("defaults", {}), dict):
        errors.append("Field 'defaults' must be a mapping")

    confdir = config.get("confdir")
    if confdir is not None and (not isinstance(confdir, str) or not confdir):
        errors.append(
            f"Field 'confdir' must be a non-empty string, got {confdir!r}"
        )

    purge = config.get("purge", False)
    if not isinstance(purge, bool):
        errors.append(f"Field 'purge' must be a boolean, got {purge!r}")

    return errors


def validate_manifest(manifest_path: Path) -> ValidationResult:
    """Validate a manifest file without writing anything.

    Args:
        manifest_path: Path to the manifest YAML file to validate.

    Returns:
        Validation status, errors, warnings and pin count.
    """
    logger = get_global_logger()
    errors: list[str] = []
    warnings: list[str] = []

    def _result(pin_count: int = 0) -> ValidationResult:
        return ValidationResult(
            status="valid" if not errors else "invalid",
            errors=errors,
            warnings=warnings,
            pin_count=pin_count,
            manifest_path=str(manifest_path),
        )

    try:
        config = load_effective_config(manifest_path)
    except ConfigError as err:
        errors.append(str(err))
        return _result()

    logger.verbose("VALIDATE", "YAML syntax is valid")

    if "apiVersion" not in config:
        errors.append("Missing required field: apiVersion")
    elif not isinstance(config["apiVersion"], str):
        errors.append("apiVersion must be a string")
    elif config["apiVersion"] != API_VERSION:
        warnings.append(
            f"apiVersion '{config['apiVersion']}' may not be supported "
            f"(expected: {API_VERSION})"
        )

    errors.extend(check_manifest_fields(config))

    defaults = config.get("defaults", {})
    if not isinstance(defaults, dict):
        defaults = {}

    if "pins" not in config:
        errors.append("Missing required field: pins")
        return _result()

    pins = config["pins"]
    if not isinstance(pins, list):
        errors.append("Field 'pins' must be a list")
        return _result()
    if not pins:
        errors.append("Field 'pins' must contain at least one pin")
        return _result()

    logger.verbose("VALIDATE", f"Found {len(pins)} pin(s)")

    seen_files: dict[str, int] = {}
    for idx, pin in enumerate(pins):
        prefix = f"pins[{idx}]"
        try:
            request = pin_request_from_config(pin, defaults)
            validate_pin(request)
        except ConfigError as err:
            errors.append(f"{prefix}: {err}")
            continue

        file_name = sanitize_file_name(request.name)
        if file_name in seen_files:
            errors.append(
                f"{prefix}: pin '{request.name}' uses the same file name "
                f"'{file_name}' as pins[{seen_files[file_name]}]"
            )
        else:
            seen_files[file_name] = idx
        logger.verbose("VALIDATE", f"[OK] Pin '{request.name}'")

    if errors:
        logger.verbose("VALIDATE", f"Manifest has {len(errors)} error(s)")
    return _result(len(pins))
