"""
Tests for aptpin.setting.writer module.

Tests setting file convergence including:
- Path mapping for conf, pref and list settings
- Create / update / unchanged / remove actions
- Dry-run mode
- Stale order prefixes and purging
"""

from __future__ import annotations

from pathlib import Path

import pytest

from aptpin.exceptions import ConfigError, SettingError
from aptpin.setting import Setting, apply_setting, purge_unmanaged, setting_path


class TestSettingPath:
    """Tests for mapping setting names to files."""

    def test_pref_path(self):
        """Test pref settings use an order prefix and .pref extension."""
        path = setting_path("pref-nginx", 50, Path("/etc/apt"))
        assert path == Path("/etc/apt/preferences.d/50-nginx.pref")

    def test_pref_order_zero_padded(self):
        """Test single-digit orders are zero padded."""
        path = setting_path("pref-nginx", 5, Path("/etc/apt"))
        assert path.name == "05-nginx.pref"

    def test_conf_path(self):
        """Test conf settings are prefixed with the order directly."""
        path = setting_path("conf-norecommends", 99, Path("/etc/apt"))
        assert path == Path("/etc/apt/apt.conf.d/99norecommends")

    def test_list_path(self):
        """Test list settings ignore the order."""
        path = setting_path("list-nginx", 10, Path("/etc/apt"))
        assert path == Path("/etc/apt/sources.list.d/nginx.list")

    def test_unknown_type(self):
        """Test unknown setting types are rejected."""
        with pytest.raises(ConfigError, match="must start with"):
            setting_path("key-nginx")

    def test_invalid_base_name(self):
        """Test base names outside APT's file name charset are rejected."""
        with pytest.raises(ConfigError, match="may only contain"):
            setting_path("pref-my pin")

    def test_negative_priority(self):
        """Test negative priorities are rejected."""
        with pytest.raises(ConfigError, match="priority"):
            setting_path("pref-nginx", -1)

    def test_three_digit_priority_rejected(self):
        """Test priorities above 99 are rejected."""
        with pytest.raises(ConfigError, match="from 0 to 99"):
            setting_path("pref-b", 100)

    def test_file_names_sort_in_priority_order(self):
        """Test lexical file order matches numeric priority order."""
        names = [
            setting_path(f"pref-p{priority}", priority).name
            for priority in (99, 50, 5, 0, 10)
        ]

        assert sorted(names) == [
            "00-p0.pref",
            "05-p5.pref",
            "10-p10.pref",
            "50-p50.pref",
            "99-p99.pref",
        ]


class TestApplySetting:
    """Tests for apply_setting."""

    def test_create(self, confdir):
        """Test a missing file is created with the content."""
        result = apply_setting(Setting(name="pref-nginx", content="a\n"), confdir)

        assert result.action == "created"
        assert result.changed is True
        assert result.path.read_text() == "a\n"

    def test_unchanged_does_not_rewrite(self, confdir):
        """Test identical content leaves the file untouched."""
        setting = Setting(name="pref-nginx", content="a\n")
        first = apply_setting(setting, confdir)
        mtime = first.path.stat().st_mtime_ns

        second = apply_setting(setting, confdir)

        assert second.action == "unchanged"
        assert second.changed is False
        assert second.notify_update is False
        assert second.path.stat().st_mtime_ns == mtime

    def test_update(self, confdir):
        """Test differing content is rewritten."""
        apply_setting(Setting(name="pref-nginx", content="a\n"), confdir)
        result = apply_setting(Setting(name="pref-nginx", content="b\n"), confdir)

        assert result.action == "updated"
        assert result.path.read_text() == "b\n"

    def test_present_behaves_like_file(self, confdir):
        """Test ensure 'present' manages content too."""
        result = apply_setting(
            Setting(name="list-nginx", content="deb x y\n", ensure="present"), confdir
        )
        assert result.action == "created"
        assert result.path.name == "nginx.list"

    def test_absent_removes(self, confdir):
        """Test ensure 'absent' removes an existing file."""
        created = apply_setting(Setting(name="pref-nginx", content="a\n"), confdir)
        result = apply_setting(
            Setting(name="pref-nginx", content="a\n", ensure="absent"), confdir
        )

        assert result.action == "removed"
        assert result.changed is True
        assert not created.path.exists()

    def test_absent_missing_file(self, confdir):
        """Test ensure 'absent' with no file is a no-op."""
        result = apply_setting(
            Setting(name="pref-nginx", content="", ensure="absent"), confdir
        )
        assert result.action == "absent"
        assert result.changed is False

    def test_dry_run_does_not_write(self, confdir):
        """Test dry run reports the action only."""
        result = apply_setting(
            Setting(name="pref-nginx", content="a\n"), confdir, dry_run=True
        )

        assert result.action == "created"
        assert not result.path.exists()

    def test_notify_update_only_on_change(self, confdir):
        """Test notify_update follows the setting flag and the change."""
        quiet = apply_setting(
            Setting(name="pref-a", content="a\n", notify_update=False), confdir
        )
        loud = apply_setting(Setting(name="list-b", content="b\n"), confdir)

        assert quiet.notify_update is False
        assert loud.notify_update is True

    def test_order_change_removes_stale_file(self, confdir):
        """Test moving a pref to another order removes the old file."""
        old = apply_setting(
            Setting(name="pref-nginx", content="a\n", priority=50), confdir
        )
        new = apply_setting(
            Setting(name="pref-nginx", content="a\n", priority=10), confdir
        )

        assert not old.path.exists()
        assert new.path.name == "10-nginx.pref"
        assert new.action == "created"

    def test_stale_match_is_exact(self, confdir):
        """Test other pins sharing a suffix are not treated as stale."""
        other = apply_setting(Setting(name="pref-my-nginx", content="a\n"), confdir)
        apply_setting(Setting(name="pref-nginx", content="a\n", priority=10), confdir)

        assert other.path.exists()

    def test_invalid_ensure(self, confdir):
        """Test unknown ensure values are rejected."""
        with pytest.raises(ConfigError, match="ensure"):
            apply_setting(Setting(name="pref-a", content="", ensure="latest"), confdir)

    def test_write_failure_raises_setting_error(self, tmp_path):
        """Test OS errors are wrapped in SettingError."""
        blocker = tmp_path / "apt"
        blocker.write_text("not a directory")

        with pytest.raises(SettingError):
            apply_setting(Setting(name="pref-a", content="a\n"), blocker)


class TestPurgeUnmanaged:
    """Tests for purge_unmanaged."""

    def test_purge_removes_unkept(self, confdir):
        """Test files outside keep are removed."""
        prefs = confdir / "preferences.d"
        prefs.mkdir()
        kept = prefs / "50-nginx.pref"
        kept.write_text("a")
        stray = prefs / "old.pref"
        stray.write_text("b")

        purged = purge_unmanaged(prefs, {kept})

        assert purged == [stray]
        assert kept.exists()
        assert not stray.exists()

    def test_purge_dry_run(self, confdir):
        """Test dry run lists but keeps files."""
        prefs = confdir / "preferences.d"
        prefs.mkdir()
        stray = prefs / "old.pref"
        stray.write_text("b")

        assert purge_unmanaged(prefs, set(), dry_run=True) == [stray]
        assert stray.exists()

    def test_purge_missing_directory(self, confdir):
        """Test a missing directory purges nothing."""
        assert purge_unmanaged(confdir / "preferences.d", set()) == []
