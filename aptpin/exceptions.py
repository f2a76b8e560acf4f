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

"""Exception hierarchy for aptpin.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors. All exceptions inherit from
AptPinError, allowing users to catch all aptpin errors with a single except
clause if needed.

Hierarchy:

- AptPinError
    - ConfigError
        - PinValidationError
            - MutualExclusionError
            - InvalidParameterError
    - SettingError

Example:
    Catching pin rule violations:
        ```python
        from aptpin.exceptions import MutualExclusionError
        from aptpin.pin import PinRequest, render_pin

        try:
            render_pin(PinRequest(name="nginx", packages="nginx",
                                  origin="nginx.org", version="1.25.*"))
        except MutualExclusionError as e:
            print(f"Conflicting pin targets: {e}")
        ```

    Catching all aptpin errors:
        ```python
        from aptpin.exceptions import AptPinError

        try:
            result = apply_manifest(Path("pins.yaml"))
        except AptPinError as e:
            print(f"aptpin error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "AptPinError",
    "ConfigError",
    "PinValidationError",
    "MutualExclusionError",
    "InvalidParameterError",
    "SettingError",
]


class AptPinError(Exception):
    """Base exception for all aptpin errors.

    All aptpin-specific exceptions inherit from this class, allowing users
    to catch all aptpin errors with a single except clause if needed.
    """

    pass


class ConfigError(AptPinError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parse errors (syntax errors, empty files, non-mapping top level)
    - Missing required pin fields (e.g., a pin without a 'name')
    - Invalid field values (unknown ensure value, negative order, unknown
        setting type)
    - Missing manifest files (file not found)

    Example:
        Catching configuration errors:
            ```python
            from aptpin.exceptions import ConfigError

            try:
                config = load_effective_config(Path("invalid.yaml"))
            except ConfigError as e:
                print(f"Config error: {e}")
            ```
    """

    pass


class PinValidationError(ConfigError):
    """Base class for violations of the pin target rules.

    Raised before any rendering takes place, so a failing pin never leaves a
    partially written file behind.
    """

    pass


class MutualExclusionError(PinValidationError):
    """Raised when two or more mutually exclusive pin targets are set.

    The pin targets are the release family (release, codename,
    release_version, component, originator, label), origin and version.
    """

    pass


class InvalidParameterError(PinValidationError):
    """Raised when a parameter is not allowed in the requested pin form.

    Currently this only covers a version pin combined with the wildcard
    package match '*'.
    """

    pass


class SettingError(AptPinError):
    """Raised for errors while converging a setting file on disk.

    This exception is raised when there are problems with:

    - Creating the target directory
    - Writing the temporary file or renaming it into place
    - Removing a file when ensure is 'absent'

    Example:
        Catching setting errors:
            ```python
            from aptpin.exceptions import SettingError

            try:
                apply_setting(setting, Path("/etc/apt"))
            except SettingError as e:
                print(f"Could not write setting: {e}")
            ```
    """

    pass
