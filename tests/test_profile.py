"""
Tests for PowerShell profile maintenance.
"""

from pathlib import Path

import pytest

from modsync.core.services.profile import PROFILE_HEADER, ensure_profile, profile_status

REQUIRED = ["Import-Module MicrosoftTeams"]


class TestProfileStatus:
    def test_missing_file(self, profile_file: Path):
        status = profile_status(profile_file, REQUIRED)
        assert not status.exists
        assert status.missing == REQUIRED
        assert not status.complete

    def test_line_present(self, profile_file: Path):
        profile_file.parent.mkdir(parents=True)
        profile_file.write_text("Set-PSReadLineOption -EditMode Emacs\n  Import-Module MicrosoftTeams  \n")
        status = profile_status(profile_file, REQUIRED)
        assert status.complete
        assert status.present == REQUIRED

    def test_line_absent(self, profile_file: Path):
        profile_file.parent.mkdir(parents=True)
        profile_file.write_text("# nothing here\n")
        status = profile_status(profile_file, REQUIRED)
        assert status.exists
        assert status.missing == REQUIRED

    def test_blank_required_lines_ignored(self, profile_file: Path):
        assert profile_status(profile_file, ["", "  "]).missing == []


class TestEnsureProfile:
    def test_creates_with_header(self, profile_file: Path):
        status = ensure_profile(profile_file, REQUIRED)
        assert status.created
        assert status.added == REQUIRED
        assert profile_file.read_text() == f"{PROFILE_HEADER}\nImport-Module MicrosoftTeams\n"

    def test_appends_to_existing(self, profile_file: Path):
        profile_file.parent.mkdir(parents=True)
        profile_file.write_text("Set-Alias ll Get-ChildItem")  # no trailing newline
        status = ensure_profile(profile_file, REQUIRED)
        assert not status.created
        assert profile_file.read_text() == "Set-Alias ll Get-ChildItem\nImport-Module MicrosoftTeams\n"

    def test_idempotent(self, profile_file: Path):
        ensure_profile(profile_file, REQUIRED)
        first = profile_file.read_text()
        status = ensure_profile(profile_file, REQUIRED)
        assert status.added == []
        assert profile_file.read_text() == first

    def test_only_missing_lines_added(self, profile_file: Path):
        profile_file.parent.mkdir(parents=True)
        profile_file.write_text("Import-Module MicrosoftTeams\n")
        status = ensure_profile(profile_file, ["Import-Module MicrosoftTeams", "Import-Module Az.Accounts"])
        assert status.added == ["Import-Module Az.Accounts"]
        assert profile_file.read_text().count("MicrosoftTeams") == 1


# ── Real-world profile files ─────────────────────────────────────────


class TestProfileEncodingAndMatching:
    def test_line_with_extra_arguments_counts(self, profile_file: Path):
        profile_file.parent.mkdir(parents=True)
        profile_file.write_text("Import-Module MicrosoftTeams -ErrorAction SilentlyContinue\n")
        status = ensure_profile(profile_file, REQUIRED)
        assert status.present == REQUIRED
        assert status.added == []
        assert profile_file.read_text().count("MicrosoftTeams") == 1

    def test_utf8_bom_is_ignored(self, profile_file: Path):
        profile_file.parent.mkdir(parents=True)
        profile_file.write_bytes("\ufeffImport-Module MicrosoftTeams\n".encode("utf-8"))
        status = ensure_profile(profile_file, REQUIRED)
        assert status.complete
        assert status.added == []
        assert profile_file.read_bytes() == "\ufeffImport-Module MicrosoftTeams\n".encode("utf-8")

    def test_utf8_bom_append(self, profile_file: Path):
        profile_file.parent.mkdir(parents=True)
        profile_file.write_bytes("\ufeff# mine".encode("utf-8"))
        ensure_profile(profile_file, REQUIRED)
        assert profile_file.read_text(encoding="utf-8-sig") == "# mine\nImport-Module MicrosoftTeams\n"

    def test_utf16_profile_raises(self, profile_file: Path):
        profile_file.parent.mkdir(parents=True)
        profile_file.write_bytes("# mine\r\n".encode("utf-16"))
        with pytest.raises(UnicodeDecodeError):
            profile_status(profile_file, REQUIRED)
