"""Smoke tests for the CLI."""

import asyncio
import re
from pathlib import Path

import pytest
from typer.testing import CliRunner

from safeguard import __version__
from safeguard.cli import _State, app
from safeguard.config import SafeguardConfig, merge_cli_overrides
from safeguard.content.lifecycle import ContentLifecycle
from safeguard.content.services import open_lifecycle


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def store_dir(tmp_path: Path, monkeypatch) -> Path:
    """Run each test from an empty directory with its own store."""
    for key in ("SAFEGUARD_STORAGE_DIR", "SAFEGUARD_MODERATOR", "SAFEGUARD_MEDIA_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("safeguard.config.CONFIG_SEARCH_PATHS", [tmp_path])
    return tmp_path / "store"


def _invoke(runner: CliRunner, store_dir: Path, *args: str):
    return runner.invoke(app, ["--store", str(store_dir), *args])


def _submitted_id(output: str) -> str:
    match = re.search(r"Submitted (\w+):", output)
    assert match, output
    return match.group(1)


class TestCLI:
    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "moderate" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestSubmit:
    def test_harmful_text(self, runner: CliRunner, store_dir: Path) -> None:
        result = _invoke(runner, store_dir, "submit", "you are an idiot")
        assert result.exit_code == 0, result.output
        assert "harmful" in result.output
        assert (store_dir / ".safeguard-store.json").exists()

    def test_safe_text(self, runner: CliRunner, store_dir: Path) -> None:
        result = _invoke(runner, store_dir, "submit", "hello, nice weather today")
        assert result.exit_code == 0
        assert "safe" in result.output

    def test_blank_text_fails(self, runner: CliRunner, store_dir: Path) -> None:
        result = _invoke(runner, store_dir, "submit", "   ")
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_media_without_file_fails(self, runner: CliRunner, store_dir: Path) -> None:
        result = _invoke(runner, store_dir, "submit", "--type", "image")
        assert result.exit_code == 1
        assert "file is required" in result.output

    def test_media_file(self, runner: CliRunner, store_dir: Path, tmp_path: Path) -> None:
        clip = tmp_path / "clip.mp4"
        clip.write_bytes(b"\x00" * 2048)
        result = _invoke(
            runner, store_dir, "submit", "--type", "video", "--file", str(clip), "--duration", "30"
        )
        assert result.exit_code == 0, result.output
        content_id = _submitted_id(result.output)

        status = _invoke(runner, store_dir, "status", content_id)
        assert "clip.mp4" in status.output


class TestModerationFlow:
    def test_queue_moderate_log(self, runner: CliRunner, store_dir: Path) -> None:
        submitted = _invoke(runner, store_dir, "submit", "hi")
        content_id = _submitted_id(submitted.output)
        assert "suspicious" in submitted.output

        queue = _invoke(runner, store_dir, "queue")
        assert content_id in queue.output

        moderated = _invoke(
            runner, store_dir, "moderate", content_id, "block", "--notes", "spam", "-m", "alice"
        )
        assert moderated.exit_code == 0, moderated.output
        assert f"Content {content_id} is now harmful" in moderated.output

        status = _invoke(runner, store_dir, "status", content_id)
        assert "Moderated by: alice" in status.output
        assert "Notes: spam" in status.output

        log = _invoke(runner, store_dir, "log")
        assert "block" in log.output

        queue = _invoke(runner, store_dir, "queue")
        assert "No content to moderate" in queue.output

    def test_moderate_unknown(self, runner: CliRunner, store_dir: Path) -> None:
        result = _invoke(runner, store_dir, "moderate", "nope", "approve")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_moderate_bad_decision(self, runner: CliRunner, store_dir: Path) -> None:
        content_id = _submitted_id(_invoke(runner, store_dir, "submit", "hi").output)
        result = _invoke(runner, store_dir, "moderate", content_id, "delete")
        assert result.exit_code != 0

    def test_status_unknown(self, runner: CliRunner, store_dir: Path) -> None:
        result = _invoke(runner, store_dir, "status", "nope")
        assert result.exit_code == 1

    def test_empty_log(self, runner: CliRunner, store_dir: Path) -> None:
        result = _invoke(runner, store_dir, "log")
        assert "No moderation activity yet" in result.output


class TestListAndStats:
    def test_stats(self, runner: CliRunner, store_dir: Path) -> None:
        _invoke(runner, store_dir, "submit", "hello, nice weather today")
        _invoke(runner, store_dir, "submit", "you are an idiot")
        result = _invoke(runner, store_dir, "stats")
        assert result.exit_code == 0
        assert "safe: 1" in result.output
        assert "harmful: 1" in result.output
        assert "suspicious: 0" in result.output

    def test_list_filters(self, runner: CliRunner, store_dir: Path) -> None:
        safe_id = _submitted_id(_invoke(runner, store_dir, "submit", "hello there friend").output)
        bad_id = _submitted_id(_invoke(runner, store_dir, "submit", "you are an idiot").output)

        result = _invoke(runner, store_dir, "list", "--status", "harmful")
        assert bad_id in result.output
        assert safe_id not in result.output

        result = _invoke(runner, store_dir, "list", "--reviewed")
        assert "No content found" in result.output


class TestGlobalOptions:
    def test_media_timeout_flag(self, runner: CliRunner, store_dir: Path) -> None:
        result = _invoke(runner, store_dir, "--media-timeout", "2.5", "stats")
        assert result.exit_code == 0, result.output
        assert _State.config.analysis.media_timeout == 2.5

    def test_media_timeout_must_be_positive(self, runner: CliRunner, store_dir: Path) -> None:
        result = _invoke(runner, store_dir, "--media-timeout", "0", "stats")
        assert result.exit_code != 0


class TestMissingRecordAfterWrite:
    @pytest.fixture
    def vanishing_reads(self, monkeypatch) -> None:
        monkeypatch.setattr(ContentLifecycle, "get", lambda self, content_id: None)

    def test_submit_reports_error(
        self, runner: CliRunner, store_dir: Path, vanishing_reads: None
    ) -> None:
        result = _invoke(runner, store_dir, "submit", "hello, nice weather today")
        assert result.exit_code == 1
        assert "was not stored" in result.output

    def test_moderate_reports_not_found(
        self, runner: CliRunner, store_dir: Path, vanishing_reads: None
    ) -> None:
        lifecycle = open_lifecycle(merge_cli_overrides(SafeguardConfig(), storage_dir=store_dir))
        content_id = asyncio.run(lifecycle.submit("text", "hello, nice weather today"))

        result = _invoke(runner, store_dir, "moderate", content_id, "approve")
        assert result.exit_code == 1
        assert "not found" in result.output
