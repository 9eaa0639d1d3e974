"""Tests for the sshhost command line."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from sshhost.main import app

runner = CliRunner()

EXISTING = """Host *
    User everyone

Host myhost
    HostName 10.0.0.1
    User admin
    IdentityFile ~/.ssh/old_key
"""


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point HOME at a temporary directory with an empty ~/.ssh."""
    (tmp_path / ".ssh").mkdir(mode=0o700)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def config_file(home):
    """Create ~/.ssh/config with EXISTING content."""
    path = home / ".ssh" / "config"
    path.write_text(EXISTING)
    return path


class TestUpdateCommand:
    """Tests for the update command."""

    def test_updates_hostname(self, config_file):
        """Test -k/-h updates HostName in the matching block."""
        result = runner.invoke(app, ["-k", "myhost", "-h", "1.2.3.4"])

        assert result.exit_code == 0
        assert config_file.read_text() == EXISTING.replace("10.0.0.1", "1.2.3.4")
        assert "updated ssh config for myhost" in result.output.lower()

    def test_all_short_flags(self, config_file):
        """Test -h, -i and -u together."""
        result = runner.invoke(
            app, ["-k", "myhost", "-h", "1.2.3.4", "-i", "~/.ssh/new_key", "-u", "ubuntu"]
        )

        assert result.exit_code == 0
        content = config_file.read_text()
        assert "    HostName 1.2.3.4\n    User ubuntu\n    IdentityFile ~/.ssh/new_key\n" in content
        assert "    User everyone\n" in content

    def test_long_flags(self, config_file):
        """Test the long option names."""
        result = runner.invoke(app, ["--key", "myhost", "--user", "deploy"])

        assert result.exit_code == 0
        assert "    User deploy\n" in config_file.read_text()

    def test_missing_config(self, home):
        """Test that a missing config exits 0 without creating a file."""
        result = runner.invoke(app, ["-k", "myhost", "-h", "1.2.3.4"])

        assert result.exit_code == 0
        assert "ssh config file not found" in result.output
        assert not (home / ".ssh" / "config").exists()

    def test_host_not_found(self, config_file):
        """Test that an unknown key exits 0 and leaves the file alone."""
        result = runner.invoke(app, ["-k", "nothere", "-u", "x"])

        assert result.exit_code == 0
        assert "host nothere not found in ssh config file" in result.output
        assert config_file.read_text() == EXISTING

    def test_wildcard_key_not_found(self, config_file):
        """Test that the '*' block is never treated as a match."""
        result = runner.invoke(app, ["-k", "*", "-u", "x"])

        assert result.exit_code == 0
        assert "not found" in result.output
        assert config_file.read_text() == EXISTING

    def test_no_flags_rewrites_identical(self, config_file):
        """Test that a match with no replacement values leaves the content as-is."""
        result = runner.invoke(app, ["-k", "myhost"])

        assert result.exit_code == 0
        assert config_file.read_text() == EXISTING
        assert "nothing to change" in result.output

    def test_parse_error_exits_1(self, config_file):
        """Test that malformed config is a fatal error."""
        config_file.write_text("Host\n")

        result = runner.invoke(app, ["-k", "myhost", "-u", "x"])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert config_file.read_text() == "Host\n"

    def test_write_error_exits_1(self, config_file):
        """Test that a write failure is a fatal error."""
        with patch("sshhost.updater.write_document", side_effect=PermissionError("denied")):
            result = runner.invoke(app, ["-k", "myhost", "-u", "x"])

        assert result.exit_code == 1
        assert "denied" in result.output

    def test_config_option(self, tmp_path):
        """Test -c points at an alternate config file."""
        path = tmp_path / "custom_config"
        path.write_text(EXISTING)

        result = runner.invoke(app, ["-c", str(path), "-k", "myhost", "-u", "ops"])

        assert result.exit_code == 0
        assert "    User ops\n" in path.read_text()

    def test_dry_run(self, config_file):
        """Test --dry-run prints the new config and leaves the file alone."""
        result = runner.invoke(app, ["-k", "myhost", "-h", "1.2.3.4", "--dry-run"])

        assert result.exit_code == 0
        assert "    HostName 1.2.3.4\n" in result.output
        assert config_file.read_text() == EXISTING

    def test_backup(self, config_file):
        """Test --backup keeps config.bak."""
        result = runner.invoke(app, ["-k", "myhost", "-u", "ops", "--backup"])

        assert result.exit_code == 0
        assert (config_file.parent / "config.bak").read_text() == EXISTING

    def test_verbose(self, config_file):
        """Test -v prints the config path being read."""
        result = runner.invoke(app, ["-k", "myhost", "-u", "ops", "-v"])

        assert result.exit_code == 0
        assert "Reading SSH config" in result.output

    def test_version(self):
        """Test --version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert result.output.startswith("sshhost ")

    def test_help_is_long_only(self):
        """Test that --help works while -h stays the hostname flag."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "--hostname" in result.output
