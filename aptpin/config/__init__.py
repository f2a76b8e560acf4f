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

"""Configuration loading for aptpin.

This module provides tools for loading and merging YAML manifests with a
layered approach:

  - Organization-wide defaults (defaults/org.yaml)
  - Host-group defaults (defaults/groups/<Group>.yaml)
  - The manifest itself (e.g., manifests/webservers/pins.yaml)

Dicts are merged recursively and lists/scalars are replaced (last wins).

Public API:

- load_effective_config: Load and merge configuration for a manifest

Example:
    Basic usage:

        from pathlib import Path
        from aptpin.config import load_effective_config

        config = load_effective_config(Path("manifests/webservers/pins.yaml"))
        for pin in config.get("pins", []):
            print(pin["name"])

"""

from .loader import load_effective_config

__all__ = ["load_effective_config"]
