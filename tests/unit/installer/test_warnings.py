"""Tests for the legacy-version and missing-git warnings."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitboot.compat import check_git_version, is_legacy_version
from gitboot.config import SettingsStore
from gitboot.constants import GIT_DOWNLOAD_URL
from gitboot.dismissal import NEVER_SHOW_AGAIN
from gitboot.git import GitInfo
from gitboot.host import WorkspaceFolder
from gitboot.recovery import is_git_repository, warn_about_missing_git
from tests.fixtures.host import FakeWindow


class TestIsLegacyVersion:
    @pytest.mark.parametrize(
        ("version", "expected"),
        [
            ("1.9.5", True),
            ("0.99", True),
            ("10.0", True),
            ("2.0.0", False),
            ("2.43.0", False),
            ("v1.0", False),
            ("", False),
        ],
    )
    def test_first_character_decides(self, version: str, expected: bool) -> None:
        assert is_legacy_version(version) is expected


class TestCheckGitVersion:
    @pytest.mark.asyncio
    async def test_modern_git_is_silent(
        self, settings: SettingsStore, window: FakeWindow
    ) -> None:
        await check_git_version(GitInfo("/usr/bin/git", "2.43.0"), settings, window)

        assert window.messages == []

    @pytest.mark.asyncio
    async def test_legacy_git_warns_with_actions(
        self, settings: SettingsStore, window: FakeWindow
    ) -> None:
        await check_git_version(GitInfo("/usr/bin/git", "1.9.5"), settings, window)

        [shown] = window.messages
        assert shown.level == "warning"
        assert "1.9.5" in shown.message
        assert shown.items == ("Update Git", NEVER_SHOW_AGAIN)
        assert window.opened == []

    @pytest.mark.asyncio
    async def test_update_opens_download_page(
        self, settings: SettingsStore, window: FakeWindow
    ) -> None:
        window.answer("Update Git")

        await check_git_version(GitInfo("/usr/bin/git", "1.9.5"), settings, window)

        assert window.opened == [GIT_DOWNLOAD_URL]
        assert settings.get("git.ignore_legacy_warning") is False

    @pytest.mark.asyncio
    async def test_dont_show_again_is_persisted(
        self, settings: SettingsStore, window: FakeWindow
    ) -> None:
        window.answer(NEVER_SHOW_AGAIN)
        info = GitInfo("/usr/bin/git", "1.9.5")

        await check_git_version(info, settings, window)
        await check_git_version(info, SettingsStore(), window)

        assert len(window.messages) == 1
        assert SettingsStore().get("git.ignore_legacy_warning") is True


class TestIsGitRepository:
    @pytest.mark.asyncio
    async def test_folder_with_dot_git_dir(self, temp_dir: Path) -> None:
        (temp_dir / ".git").mkdir()

        assert await is_git_repository(WorkspaceFolder.from_path(temp_dir)) is True

    @pytest.mark.asyncio
    async def test_dot_git_file_does_not_count(self, temp_dir: Path) -> None:
        (temp_dir / ".git").write_text("gitdir: ../elsewhere\n")

        assert await is_git_repository(WorkspaceFolder.from_path(temp_dir)) is False

    @pytest.mark.asyncio
    async def test_missing_folder(self, temp_dir: Path) -> None:
        folder = WorkspaceFolder.from_path(temp_dir / "missing")

        assert await is_git_repository(folder) is False

    @pytest.mark.asyncio
    async def test_non_file_scheme(self, temp_dir: Path) -> None:
        (temp_dir / ".git").mkdir()
        folder = WorkspaceFolder(path=temp_dir, scheme="vscode-remote")

        assert await is_git_repository(folder) is False

    @pytest.mark.asyncio
    async def test_unusable_path(self) -> None:
        folder = WorkspaceFolder(path=Path("/tmp/a\x00b"))

        assert await is_git_repository(folder) is False


class TestWarnAboutMissingGit:
    @pytest.mark.asyncio
    async def test_no_folders_is_silent(
        self, settings: SettingsStore, window: FakeWindow
    ) -> None:
        await warn_about_missing_git([], settings, window)
        await warn_about_missing_git(None, settings, window)

        assert window.messages == []

    @pytest.mark.asyncio
    async def test_folders_without_repositories_are_silent(
        self, settings: SettingsStore, window: FakeWindow, temp_dir: Path
    ) -> None:
        await warn_about_missing_git(
            [WorkspaceFolder.from_path(temp_dir)], settings, window
        )

        assert window.messages == []

    @pytest.mark.asyncio
    async def test_unusable_folder_does_not_hide_repository(
        self, settings: SettingsStore, window: FakeWindow, temp_dir: Path
    ) -> None:
        (temp_dir / ".git").mkdir()
        folders = [
            WorkspaceFolder(path=Path("/tmp/a\x00b")),
            WorkspaceFolder.from_path(temp_dir),
        ]

        await warn_about_missing_git(folders, settings, window)

        assert window.levels() == ["warning"]

    @pytest.mark.asyncio
    async def test_repository_folder_triggers_warning(
        self, settings: SettingsStore, window: FakeWindow, temp_dir: Path
    ) -> None:
        repo = temp_dir / "repo"
        (repo / ".git").mkdir(parents=True)
        plain = temp_dir / "plain"
        plain.mkdir()
        window.answer("Download Git")

        await warn_about_missing_git(
            [WorkspaceFolder.from_path(plain), WorkspaceFolder.from_path(repo)],
            settings,
            window,
        )

        [shown] = window.messages
        assert shown.message == (
            "Git not found. Install it or configure it using the 'git.path' setting."
        )
        assert shown.items == ("Download Git", NEVER_SHOW_AGAIN)
        assert window.opened == [GIT_DOWNLOAD_URL]

    @pytest.mark.asyncio
    async def test_dont_show_again_suppresses_later_warnings(
        self, settings: SettingsStore, window: FakeWindow, temp_dir: Path
    ) -> None:
        (temp_dir / ".git").mkdir()
        folders = [WorkspaceFolder.from_path(temp_dir)]
        window.answer(NEVER_SHOW_AGAIN)

        await warn_about_missing_git(folders, settings, window)
        await warn_about_missing_git(folders, settings, window)

        assert len(window.messages) == 1
        assert settings.get("git.ignore_missing_git_warning") is True

    @pytest.mark.asyncio
    async def test_dismissing_without_choice_changes_nothing(
        self, settings: SettingsStore, window: FakeWindow, temp_dir: Path
    ) -> None:
        (temp_dir / ".git").mkdir()
        folders = [WorkspaceFolder.from_path(temp_dir)]

        await warn_about_missing_git(folders, settings, window)
        await warn_about_missing_git(folders, settings, window)

        assert len(window.messages) == 2
        assert settings.get("git.ignore_missing_git_warning") is False
