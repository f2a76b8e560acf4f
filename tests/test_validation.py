"""
Tests for manifest validation module.

This module tests the validation functionality that checks manifest syntax
and pin rules without writing any files.
"""

from __future__ import annotations

from aptpin.validation import validate_manifest


class TestValidateManifest:
    """Tests for validate_manifest function."""

    def test_valid_manifest(self, manifest_path):
        """Test that a valid manifest passes validation."""
        result = validate_manifest(manifest_path)

        assert result.status == "valid"
        assert result.pin_count == 2
        assert result.errors == []
        assert result.warnings == []
        assert result.manifest_path == str(manifest_path)

    def test_missing_file(self, tmp_path):
        """Test that a missing manifest is invalid."""
        result = validate_manifest(tmp_path / "missing.yaml")

        assert result.status == "invalid"
        assert "file not found" in result.errors[0]
        assert result.pin_count == 0

    def test_invalid_yaml(self, tmp_path):
        """Test that YAML syntax errors are reported."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text("pins: [unclosed\n")

        result = validate_manifest(manifest)

        assert result.status == "invalid"
        assert "Error parsing YAML" in result.errors[0]

    def test_missing_api_version(self, tmp_path):
        """Test that apiVersion is required."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text("pins:\n  - name: nginx\n")

        result = validate_manifest(manifest)

        assert result.status == "invalid"
        assert "Missing required field: apiVersion" in result.errors

    def test_unknown_api_version_warns(self, tmp_path):
        """Test that an unexpected apiVersion is only a warning."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text("apiVersion: aptpin/v2\npins:\n  - name: nginx\n")

        result = validate_manifest(manifest)

        assert result.status == "valid"
        assert "aptpin/v2" in result.warnings[0]

    def test_missing_pins(self, tmp_path):
        """Test that pins is required."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text("apiVersion: aptpin/v1\n")

        result = validate_manifest(manifest)

        assert "Missing required field: pins" in result.errors

    def test_pins_not_a_list(self, tmp_path):
        """Test that pins must be a list."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text("apiVersion: aptpin/v1\npins:\n  name: nginx\n")

        result = validate_manifest(manifest)

        assert "Field 'pins' must be a list" in result.errors

    def test_empty_pins(self, tmp_path):
        """Test that pins must not be empty."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text("apiVersion: aptpin/v1\npins: []\n")

        result = validate_manifest(manifest)

        assert "Field 'pins' must contain at least one pin" in result.errors

    def test_collects_errors_for_every_pin(self, tmp_path):
        """Test that each bad pin contributes its own error."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text(
            """
apiVersion: aptpin/v1
pins:
  - name: good
    release: stable
  - name: conflict
    packages: nginx
    origin: nginx.org
    version: "1.25.*"
  - name: general-version
    version: "1.0"
  - packages: nameless
"""
        )

        result = validate_manifest(manifest)

        assert result.status == "invalid"
        assert result.pin_count == 4
        assert len(result.errors) == 3
        assert result.errors[0].startswith("pins[1]: ")
        assert "mutually exclusive" in result.errors[0]
        assert result.errors[1].startswith("pins[2]: ")
        assert "general form" in result.errors[1]
        assert result.errors[2].startswith("pins[3]: ")
        assert "name" in result.errors[2]

    def test_duplicate_file_names(self, tmp_path):
        """Test that two pins sanitizing to one file name are rejected."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text(
            """
apiVersion: aptpin/v1
pins:
  - name: "my pin"
  - name: "my_pin"
"""
        )

        result = validate_manifest(manifest)

        assert result.status == "invalid"
        assert "pins[1]" in result.errors[0]
        assert "pins[0]" in result.errors[0]

    def test_defaults_applied(self, tmp_path):
        """Test manifest defaults are validated with each pin."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text(
            """
apiVersion: aptpin/v1
defaults:
  order: -5
pins:
  - name: nginx
"""
        )

        result = validate_manifest(manifest)

        assert result.status == "invalid"
        assert "order" in result.errors[0]

    def test_non_string_confdir(self, tmp_path):
        """Test that confdir must be a string."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text("apiVersion: aptpin/v1\nconfdir: 5\npins:\n  - name: a\n")

        result = validate_manifest(manifest)

        assert result.status == "invalid"
        assert "Field 'confdir' must be a non-empty string, got 5" in result.errors

    def test_non_boolean_purge(self, tmp_path):
        """Test that purge must be a boolean, as apply requires."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text(
            "apiVersion: aptpin/v1\npurge: sometimes\npins:\n  - name: a\n"
        )

        result = validate_manifest(manifest)

        assert result.status == "invalid"
        assert "Field 'purge' must be a boolean, got 'sometimes'" in result.errors

    def test_namespace_line_break(self, tmp_path):
        """Test that a multi-line namespace is rejected."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text(
            """
apiVersion: aptpin/v1
namespace: |
  myapp
  Pin-Priority: 1001
pins:
  - name: nginx
"""
        )

        result = validate_manifest(manifest)

        assert "Field 'namespace' must not contain line breaks" in result.errors

    def test_explanation_line_break(self, tmp_path):
        """Test that a block scalar explanation is reported for its pin."""
        manifest = tmp_path / "pins.yaml"
        manifest.write_text(
            """
apiVersion: aptpin/v1
pins:
  - name: nginx
    explanation: |
      keep nginx
      Pin-Priority: 1001
"""
        )

        result = validate_manifest(manifest)

        assert result.status == "invalid"
        assert result.errors[0].startswith("pins[0]: ")
        assert "explanation must not contain line breaks" in result.errors[0]
