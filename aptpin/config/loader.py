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

"""Configuration loading and merging for aptpin.

This module implements a three-layer configuration system that lets
organization-wide defaults be overridden by host-group settings and finally
by the manifest itself.

Configuration Layers:
    1. **Organization defaults** (defaults/org.yaml)
        - Base configuration for every manifest
        - Typically sets confdir, purge and pin defaults (order, priority)
        - Found by walking upward from the manifest directory

    2. **Group defaults** (defaults/groups/<Group>.yaml)
        - Settings shared by one group of hosts (e.g., "webservers")
        - Optional; only loaded if a group is detected and the file exists
        - Overrides organization defaults

    3. **Manifest** (e.g., manifests/webservers/pins.yaml)
        - The pins themselves
        - Always required
        - Overrides group and organization defaults

Merge Behavior:
    The loader performs deep merging with "last wins" semantics:

    - **Dicts**: Recursively merged (keys from overlay override base)
    - **Lists**: Completely replaced (NOT appended/extended), so the
      manifest's 'pins' list is never combined with pins from defaults
    - **Scalars**: Overwritten (strings, numbers, booleans)

Path Resolution:
    A relative 'confdir' is resolved against the MANIFEST FILE location.

Error Handling:
    - ConfigError: Manifest file doesn't exist, YAML parse errors, empty
        files, or a top level that is not a mapping
    - All errors are chained with "from err" for better debugging

Example:
    Basic usage:
        ```python
        from pathlib import Path
        from aptpin.config import load_effective_config

        cfg = load_effective_config(Path("manifests/webservers/pins.yaml"))
        print(cfg["pins"][0]["name"])  # Output: nginx
        ```

    Override group detection:
        ```python
        cfg = load_effective_config(
            Path("manifests/pins.yaml"),
            group="databases",
        )
        ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from aptpin.exceptions import ConfigError
from aptpin.logging import get_global_logger

# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """Loads a YAML file and returns the parsed Python object.

    Args:
        p: Path to the YAML file to load.

    Returns:
        The parsed Python object from the YAML file.

    Raises:
        ConfigError: When file does not exist, invalid YAML (parse error), or
            empty files.
    """
    if not p.exists():
        raise ConfigError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep-merges two dicts with "overlay wins" semantics.

    This function does not mutate inputs; returns a new dict.

    Args:
        base: The base dictionary.
        overlay: The overlay dictionary that takes precedence.

    Returns:
        A new dictionary with the merged contents.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


# -------------------------------
# Defaults discovery
# -------------------------------


def _find_defaults_root(start_dir: Path) -> Path | None:
    """Walks upward from start_dir looking for a defaults/org.yaml file.

    Returns:
        The defaults/ directory if found, None otherwise.
    """
    for parent in [start_dir] + list(start_dir.parents):
        candidate = parent / "defaults" / "org.yaml"
        if candidate.exists():
            return parent / "defaults"
    return None


def _detect_group(manifest_path: Path, manifest_obj: dict[str, Any]) -> str | None:
    """Determines the host group for this manifest.

    Priority:

    1. The manifest's top-level 'group' field
    2. Folder name of the manifest (manifests/webservers/pins.yaml ->
       webservers)
    """
    group = manifest_obj.get("group")
    if isinstance(group, str) and group.strip():
        return group.strip()
    return manifest_path.parent.name or None


# -------------------------------
# Path resolution
# -------------------------------


def _resolve_known_paths(cfg: dict[str, Any], manifest_dir: Path) -> None:
    """Resolves a relative 'confdir' against the manifest directory.

    Modifies cfg in place.
    """
    raw = cfg.get("confdir")
    if isinstance(raw, str) and raw:
        p = Path(raw)
        if not p.is_absolute():
            cfg["confdir"] = str((manifest_dir / p).resolve())


# -------------------------------
# Verbose helpers
# -------------------------------


def _print_yaml_content(data: dict[str, Any], indent: int = 0) -> None:
    """Print YAML content in a readable format for debug mode."""
    logger = get_global_logger()

    yaml_str = yaml.dump(data, default_flow_style=False, sort_keys=False)
    for line in yaml_str.split("\n"):
        if line.strip():
            logger.debug("CONFIG", " " * indent + line)


# -------------------------------
# Public API
# -------------------------------


def load_effective_config(
    manifest_path: Path,
    *,
    group: str | None = None,
) -> dict[str, Any]:
    """Loads and merges the effective configuration for a manifest.

    Performs the following operations:

    1. Read manifest YAML
    2. Find defaults root by scanning upwards for defaults/org.yaml
    3. Load org defaults
    4. Determine group (param group > manifest 'group' > folder name)
    5. Load group defaults if present
    6. Merge: org -> group -> manifest (dicts deep-merge, lists replace)
    7. Resolve a relative confdir against the manifest directory

    Args:
        manifest_path: Path to the manifest YAML file.
        group: Optional host group override.

    Returns:
        A merged configuration dict. If no defaults were found in the tree,
            the manifest is returned as-is (with path resolution).

    Raises:
        ConfigError: On YAML parse errors, empty files, invalid structure, or
            if the manifest file is missing.
    """
    logger = get_global_logger()
    manifest_path = manifest_path.resolve()
    manifest_dir = manifest_path.parent

    logger.verbose("CONFIG", f"Loading manifest: {manifest_path}")

    # 1) Read manifest
    manifest_obj = _load_yaml_file(manifest_path)
    if not isinstance(manifest_obj, dict):
        raise ConfigError(
            f"top-level YAML must be a mapping (dict): {manifest_path}"
        )

    # 2) Find defaults root
    defaults_root = _find_defaults_root(manifest_dir)
    if defaults_root:
        logger.verbose("CONFIG", f"Found defaults root: {defaults_root}")

    merged: dict[str, Any] = {}
    layers_merged = 0

    if defaults_root:
        # 3) Load org defaults
        org_defaults_path = defaults_root / "org.yaml"
        logger.verbose(
            "CONFIG", f"Loading: {org_defaults_path.relative_to(defaults_root.parent)}"
        )
        org_defaults = _load_yaml_file(org_defaults_path)
        if isinstance(org_defaults, dict):
            logger.debug("CONFIG", "--- Content from org.yaml ---")
            _print_yaml_content(org_defaults)
            merged = _deep_merge_dicts(merged, org_defaults)
            layers_merged += 1
        else:
            logger.warning(
                "CONFIG", f"Ignoring {org_defaults_path}: not a mapping"
            )

        # 4) Determine group
        group_name = group or _detect_group(manifest_path, manifest_obj)

        # 5) Load group defaults if present
        if group_name:
            candidate = defaults_root / "groups" / f"{group_name}.yaml"
            if candidate.exists():
                logger.verbose("CONFIG", f"Detected group: {group_name}")
                logger.verbose(
                    "CONFIG", f"Loading: {candidate.relative_to(defaults_root.parent)}"
                )
                group_defaults = _load_yaml_file(candidate)
                if isinstance(group_defaults, dict):
                    logger.debug("CONFIG", f"--- Content from {group_name}.yaml ---")
                    _print_yaml_content(group_defaults)
                    merged = _deep_merge_dicts(merged, group_defaults)
                    layers_merged += 1

    logger.debug("CONFIG", f"--- Content from {manifest_path.name} ---")
    _print_yaml_content(manifest_obj)

    # 6) Merge manifest on top
    merged = _deep_merge_dicts(merged, manifest_obj)
    layers_merged += 1

    logger.verbose("CONFIG", f"Deep merging {layers_merged} layer(s)")
    logger.debug("CONFIG", "--- Final Merged Configuration ---")
    _print_yaml_content(merged)

    # 7) Resolve relative paths
    _resolve_known_paths(merged, manifest_dir)

    return merged
