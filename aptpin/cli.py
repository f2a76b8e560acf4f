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

"""Command-line interface for aptpin.

This module provides the main CLI entry point for the aptpin tool, offering
commands for manifest validation, pin rendering, applying pins to a host and
reporting system facts.

Commands:

    validate: Validate manifest syntax and pin rules
    render: Print the preference files a manifest would produce
    apply: Converge preference files on disk
    facts: Report system facts (e.g., apt_reboot_required)

Example:
    Validate a manifest:
        ```bash
        $ aptpin validate manifests/webservers/pins.yaml
        ```

    Preview changes without writing:
        ```bash
        $ aptpin apply manifests/webservers/pins.yaml --dry-run
        ```

    Apply to a staging tree:
        ```bash
        $ aptpin apply manifests/webservers/pins.yaml --confdir ./staging/etc/apt
        ```

    Report facts as JSON:
        ```bash
        $ aptpin facts --json
        ```

Exit Codes:

- 0: Success
- 1: Error (configuration, pin validation or write failure)

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
import json
from pathlib import Path
import sys

from aptpin.core import apply_manifest, render_manifest
from aptpin.exceptions import AptPinError
from aptpin.facts import collect_facts
from aptpin.logging import get_logger, set_global_logger
from aptpin.validation import validate_manifest


def _print_error(err: Exception, args: argparse.Namespace) -> None:
    print(f"Error: {err}")
    if args.verbose or getattr(args, "debug", False):
        import traceback

        traceback.print_exc()


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'aptpin validate' command.

    Validates manifest syntax and every pin without touching the filesystem.

    Args:
        args: Parsed command-line arguments containing
            manifest path and verbose flag.

    Returns:
        Exit code (0 for valid manifest, 1 for invalid).

    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    manifest_path = Path(args.manifest).resolve()

    print(f"Validating manifest: {manifest_path}")
    print()

    result = validate_manifest(manifest_path)

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Manifest:    {result.manifest_path}")
    print(f"Status:      {result.status.upper()}")
    print(f"Pin Count:   {result.pin_count}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Manifest is valid!")
        return 0
    else:
        print()
        print(
            f"[FAILED] Manifest validation failed with {len(result.errors)} error(s)."
        )
        return 1


def cmd_render(args: argparse.Namespace) -> int:
    """Handler for 'aptpin render' command.

    Prints each preference file the manifest would produce, preceded by its
    setting name.

    Args:
        args: Parsed command-line arguments containing
            manifest path and verbosity flags.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    manifest_path = Path(args.manifest).resolve()

    try:
        rendered = render_manifest(manifest_path)
    except AptPinError as err:
        _print_error(err, args)
        return 1

    for pin in rendered:
        print(
            f"--- {pin.setting.name} "
            f"(ensure: {pin.setting.ensure}, order: {pin.setting.priority})"
        )
        print(pin.content, end="")
        print()

    return 0


def cmd_apply(args: argparse.Namespace) -> int:
    """Handler for 'aptpin apply' command.

    Renders every pin and converges the preference files under the APT
    configuration directory. Files are only written when their content
    changes.

    Args:
        args: Parsed command-line arguments containing
            manifest path, confdir, dry-run flag and verbosity flags.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    manifest_path = Path(args.manifest).resolve()
    confdir = Path(args.confdir) if args.confdir else None

    if not manifest_path.exists():
        print(f"Error: Manifest file not found: {manifest_path}")
        return 1

    print(f"Applying manifest: {manifest_path}")
    if args.dry_run:
        print("Dry run: no files will be written")
    print()

    try:
        result = apply_manifest(manifest_path, confdir, dry_run=args.dry_run)
    except AptPinError as err:
        _print_error(err, args)
        return 1

    print("=" * 70)
    print("APPLY RESULTS")
    print("=" * 70)
    print(f"Config Directory: {result.confdir}")
    for setting in result.settings:
        print(f"  {setting.action:<10} {setting.path}")
    for path in result.purged:
        print(f"  {'purged':<10} {path}")
    print("=" * 70)
    print()

    if any(s.notify_update for s in result.settings):
        print("[NOTE] Package index refresh required: run 'apt-get update'")
    if result.changed:
        verb = "would change" if result.dry_run else "changed"
        print(f"[SUCCESS] Settings {verb}.")
    else:
        print("[SUCCESS] All settings up to date.")

    return 0


def cmd_facts(args: argparse.Namespace) -> int:
    """Handler for 'aptpin facts' command.

    Resolves every fact confined to the host's OS family.

    Args:
        args: Parsed command-line arguments containing
            optional OS family override, json flag and verbose flag.

    Returns:
        Exit code (always 0; fact probes never fail).

    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    facts = collect_facts(args.os_family)

    if args.json:
        print(json.dumps(facts, indent=2, sort_keys=True))
        return 0

    if not facts:
        print("No facts apply to this OS family.")
    for name, value in facts.items():
        if isinstance(value, bool):
            value = str(value).lower()
        print(f"{name} => {value}")
    return 0


def _package_version() -> str:
    try:
        return version("aptpin")
    except PackageNotFoundError:
        from aptpin import __version__

        return __version__


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands registered."""
    parser = argparse.ArgumentParser(
        prog="aptpin",
        description="aptpin - manage APT pin preference files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"aptpin {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate manifest syntax and pin rules (no writes)",
        description="Check a manifest for YAML errors and invalid pins.",
    )
    parser_validate.add_argument("manifest", help="Path to the manifest YAML file")
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate)

    # 'render' command
    parser_render = subparsers.add_parser(
        "render",
        help="Print the preference files a manifest produces",
        description="Render every pin of a manifest to stdout.",
    )
    parser_render.add_argument("manifest", help="Path to the manifest YAML file")
    parser_render.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser_render.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_render.set_defaults(func=cmd_render)

    # 'apply' command
    parser_apply = subparsers.add_parser(
        "apply",
        help="Write preference files for a manifest",
        description="Converge preference files under the APT config directory.",
    )
    parser_apply.add_argument("manifest", help="Path to the manifest YAML file")
    parser_apply.add_argument(
        "--confdir",
        default=None,
        help="APT configuration directory (default: from manifest or /etc/apt)",
    )
    parser_apply.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without writing any file",
    )
    parser_apply.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser_apply.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_apply.set_defaults(func=cmd_apply)

    # 'facts' command
    parser_facts = subparsers.add_parser(
        "facts",
        help="Report system facts",
        description="Resolve the facts confined to this host's OS family.",
    )
    parser_facts.add_argument(
        "--os-family",
        default=None,
        help="OS family to collect for (default: detected from /etc/os-release)",
    )
    parser_facts.add_argument(
        "--json",
        action="store_true",
        help="Print facts as a JSON object",
    )
    parser_facts.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show the detected OS family",
    )
    parser_facts.set_defaults(func=cmd_facts)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the aptpin CLI.

    This function is registered as the 'aptpin' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
