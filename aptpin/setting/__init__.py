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

"""Setting file management for aptpin.

This package converges files under the APT configuration directory
(apt.conf.d, preferences.d and sources.list.d) to a desired state, writing
only when content actually changes.

Public API:

- Setting: Desired state of one file
- setting_path: Map a setting name to its file path
- apply_setting: Converge one file (idempotent)
- purge_unmanaged: Remove files no setting accounts for

Example:
    Basic usage:

        from pathlib import Path
        from aptpin.setting import Setting, apply_setting

        result = apply_setting(
            Setting(name="conf-no-recommends",
                    content='APT::Install-Recommends "false";\n',
                    priority=99),
            Path("/etc/apt"),
        )

"""

from .writer import (
    DEFAULT_CONFDIR,
    Setting,
    apply_setting,
    purge_unmanaged,
    setting_path,
)

__all__ = [
    "DEFAULT_CONFDIR",
    "Setting",
    "setting_path",
    "apply_setting",
    "purge_unmanaged",
]
