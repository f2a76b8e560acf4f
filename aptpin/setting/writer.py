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

"""Idempotent setting file writer for aptpin.

A Setting describes the desired state of one file under the APT
configuration directory. apply_setting() converges the file to that state:
it compares the SHA-256 of what is on disk with the SHA-256 of the desired
content, writes only on mismatch, and removes the file when ensure is
'absent'. Applying the same setting twice never rewrites the file.

Setting Families:

| name prefix | directory       | file name                  |
|-------------|-----------------|----------------------------|
| conf-       | apt.conf.d      | <order:02d><base>          |
| pref-       | preferences.d   | <order:02d>-<base>.pref    |
| list-       | sources.list.d  | <base>.list                |

Writes go to '<file>.part' first and are renamed into place, so a reader
never sees a half written file.

Example:
    Converge a preference file:
        ```python
        from pathlib import Path
        from aptpin.setting import Setting, apply_setting

        setting = Setting(name="pref-nginx", content="...", priority=50)
        result = apply_setting(setting, Path("/etc/apt"))
        print(result.action)  # created, updated or unchanged
        ```
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
from pathlib import Path
import re

from aptpin.exceptions import ConfigError, SettingError
from aptpin.logging import get_global_logger
from aptpin.results import SettingResult

__all__ = [
    "DEFAULT_CONFDIR",
    "MAX_PRIORITY",
    "Setting",
    "setting_path",
    "apply_setting",
    "purge_unmanaged",
]

DEFAULT_CONFDIR = Path("/etc/apt")

# Two-digit prefixes keep lexical order equal to numeric order
MAX_PRIORITY = 99

# setting type -> (directory under confdir, file extension)
SETTING_TYPES: dict[str, tuple[str, str]] = {
    "conf": ("apt.conf.d", ""),
    "pref": ("preferences.d", ".pref"),
    "list": ("sources.list.d", ".list"),
}

# APT silently ignores files in its .d directories with other characters
_VALID_BASE_NAME = re.compile(r"^[0-9A-Za-z\-_.]+$")


@dataclass(frozen=True)
class Setting:
    """Desired state of one APT configuration file.

    Attributes:
        name: "<type>-<base>", e.g. "pref-nginx".
        content: Full file content.
        ensure: "file" or "present" to manage the file, "absent" to remove it.
        priority: Ordering hint from 0 to 99, used as a two-digit file name
            prefix for conf and pref settings.
        notify_update: Whether a change to this file calls for an
            'apt-get update'.
    """

    name: str
    content: str
    ensure: str = "file"
    priority: int = 50
    notify_update: bool = True


def _split_name(name: str) -> tuple[str, str]:
    setting_type, sep, base = name.partition("-")
    if not sep or setting_type not in SETTING_TYPES:
        raise ConfigError(
            f"setting name must start with one of "
            f"{', '.join(t + '-' for t in SETTING_TYPES)}: {name!r}"
        )
    if not _VALID_BASE_NAME.match(base):
        raise ConfigError(
            f"setting name {name!r} may only contain [0-9A-Za-z-_.] after the type"
        )
    return setting_type, base


def setting_path(
    name: str, priority: int = 50, confdir: Path = DEFAULT_CONFDIR
) -> Path:
    """Return the file path a setting is written to.

    Args:
        name: Setting name ("conf-...", "pref-..." or "list-...").
        priority: Ordering hint for conf and pref settings.
        confdir: APT configuration directory.

    Returns:
        Absolute or confdir-relative path of the managed file.

    Raises:
        ConfigError: On an unknown setting type, an invalid base name or a
            priority outside 0-99.

    Example:
        >>> setting_path("pref-nginx", 50, Path("/etc/apt"))
        PosixPath('/etc/apt/preferences.d/50-nginx.pref')
    """
    setting_type, base = _split_name(name)
    if (
        isinstance(priority, bool)
        or not isinstance(priority, int)
        or not 0 <= priority <= MAX_PRIORITY
    ):
        raise ConfigError(
            f"setting {name!r}: priority must be an integer from 0 to "
            f"{MAX_PRIORITY}, got {priority!r}"
        )

    directory, ext = SETTING_TYPES[setting_type]
    if setting_type == "conf":
        filename = f"{priority:02d}{base}{ext}"
    elif setting_type == "pref":
        filename = f"{priority:02d}-{base}{ext}"
    else:
        filename = f"{base}{ext}"
    return confdir / directory / filename


def _stale_siblings(name: str, target: Path) -> list[Path]:
    """Return pref files for the same base written with another order prefix."""
    setting_type, base = _split_name(name)
    if setting_type != "pref" or not target.parent.is_dir():
        return []
    pattern = re.compile(rf"^\d+-{re.escape(base)}\.pref$")
    return sorted(
        p
        for p in target.parent.iterdir()
        if p != target and p.is_file() and pattern.match(p.name)
    )


def _sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as err:
        raise SettingError(f"failed to remove {path}: {err}") from err


def _write_atomic(path: Path, data: bytes) -> None:
    tmp = path.with_name(path.name + ".part")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(data)
        tmp.replace(path)
    except OSError as err:
        try:
            tmp.unlink()
        except OSError:
            pass
        raise SettingError(f"failed to write {path}: {err}") from err


def apply_setting(
    setting: Setting,
    confdir: Path = DEFAULT_CONFDIR,
    *,
    dry_run: bool = False,
) -> SettingResult:
    """Converge one setting file to its desired state.

    For ensure 'file' or 'present' the file is written when it is missing or
    its SHA-256 differs from the desired content. For ensure 'absent' the
    file is removed if it exists. Pref files left behind under a previous
    order prefix are removed in both cases.

    Args:
        setting: Desired state.
        confdir: APT configuration directory.
        dry_run: If True, report the action without touching the filesystem.

    Returns:
        What was done (or would be done) to the file.

    Raises:
        ConfigError: If the setting name, ensure or priority is invalid.
        SettingError: If the file cannot be read, written or removed.
    """
    logger = get_global_logger()

    if setting.ensure not in ("file", "present", "absent"):
        raise ConfigError(
            f"setting {setting.name!r}: ensure must be file, present or absent, "
            f"got {setting.ensure!r}"
        )

    target = setting_path(setting.name, setting.priority, confdir)
    stale = _stale_siblings(setting.name, target)
    for old in stale:
        logger.verbose("SETTING", f"Removing stale file: {old}")
        if not dry_run:
            _remove(old)

    if setting.ensure == "absent":
        if target.exists():
            action = "removed"
            logger.verbose("SETTING", f"Removing: {target}")
            if not dry_run:
                _remove(target)
        else:
            action = "removed" if stale else "absent"
    else:
        desired = setting.content.encode("utf-8")
        try:
            existing = target.read_bytes()
        except FileNotFoundError:
            existing = None
        except OSError as err:
            raise SettingError(f"failed to read {target}: {err}") from err

        if existing is None:
            action = "created"
        elif _sha256_bytes(existing) == _sha256_bytes(desired):
            action = "unchanged"
        else:
            action = "updated"

        logger.debug("SETTING", f"SHA-256 desired: {_sha256_bytes(desired)}")
        if action != "unchanged":
            logger.verbose("SETTING", f"Writing: {target}")
            if not dry_run:
                _write_atomic(target, desired)
        elif stale:
            action = "updated"

    changed = action not in ("unchanged", "absent")
    logger.verbose("SETTING", f"{setting.name}: {action}")

    return SettingResult(
        name=setting.name,
        path=target,
        action=action,
        changed=changed,
        notify_update=changed and setting.notify_update,
    )


def purge_unmanaged(
    directory: Path, keep: set[Path], *, dry_run: bool = False
) -> list[Path]:
    """Remove files in a managed directory that no setting accounts for.

    Args:
        directory: Directory to purge (e.g., /etc/apt/preferences.d).
        keep: Paths that are managed and must stay.
        dry_run: If True, only report what would be removed.

    Returns:
        Sorted list of removed (or removable) paths.

    Raises:
        SettingError: If a file cannot be removed.
    """
    logger = get_global_logger()

    if not directory.is_dir():
        return []

    keep_resolved = {p.resolve() for p in keep}
    purged = sorted(
        p
        for p in directory.iterdir()
        if p.is_file() and p.resolve() not in keep_resolved
    )
    for path in purged:
        logger.verbose("SETTING", f"Purging unmanaged file: {path}")
        if not dry_run:
            _remove(path)
    return purged
