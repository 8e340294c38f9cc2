"""Behavior tests for CLI argument dispatch and exit semantics."""

import json
from pathlib import Path

import pytest

import qstamp.__main__ as cli

DESCRIPTION = "Intro\n\n1. What is caching?\n\n2. Why use eviction?\n\n"


@pytest.fixture
def video_files(tmp_path: Path, make_vtt) -> tuple[Path, Path]:
    description = tmp_path / "video.description"
    description.write_text(DESCRIPTION, encoding="utf-8")
    captions = tmp_path / "video.en.vtt"
    captions.write_text(
        make_vtt(
            ("00:00:12.000", "00:00:14.000", "what is caching"),
            ("00:00:45.000", "00:00:47.000", "why use eviction"),
        ),
        encoding="utf-8",
    )
    return description, captions


def _stage_episode(meta_dir: Path, number: str, title: str, make_vtt) -> None:
    base = f"{number}.{title}.vid."
    (meta_dir / f"{base}description").write_text(DESCRIPTION, encoding="utf-8")
    (meta_dir / f"{base}en.vtt").write_text(
        make_vtt(("00:01:00.000", "00:01:02.000", "what is caching")),
        encoding="utf-8",
    )


def test_cli_log_level_flag_overrides_environment_level(
    monkeypatch: pytest.MonkeyPatch, run_cli, video_files
) -> None:
    """`--log-level` should override LOG_LEVEL for the command invocation."""
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    configured_levels: list[str | int | None] = []

    def _capture_log_level(level: str | int | None = None) -> int:
        configured_levels.append(level)
        return 0

    monkeypatch.setattr(cli, "configure_logging", _capture_log_level)
    description, captions = video_files

    code, _ = run_cli(
        ["--description", str(description), "--captions", str(captions), "--log-level", "DEBUG"]
    )

    assert code == 0
    assert configured_levels[-1] == "DEBUG"


def test_cli_exits_with_error_without_inputs(run_cli) -> None:
    """The CLI should return exit code 1 when neither mode is selected."""
    code, _ = run_cli([])

    assert code == 1


def test_cli_exits_with_error_when_file_is_missing(run_cli, video_files, tmp_path: Path) -> None:
    description, _ = video_files

    code, _ = run_cli(
        ["--description", str(description), "--captions", str(tmp_path / "absent.vtt")]
    )

    assert code == 1


def test_cli_single_video_prints_index(run_cli, video_files) -> None:
    description, captions = video_files

    code, output = run_cli(
        ["--description", str(description), "--captions", str(captions), "--lead-in", "0"]
    )

    assert code == 0
    assert "00:12" in output
    assert "00:45" in output
    assert "What is caching?" in output


def test_cli_single_video_saves_json(run_cli, video_files, tmp_path: Path) -> None:
    description, captions = video_files
    target = tmp_path / "index.json"

    code, _ = run_cli(
        [
            "--description",
            str(description),
            "--captions",
            str(captions),
            "--json",
            str(target),
        ]
    )

    assert code == 0
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert [stamp["atStr"] for stamp in payload["timestamps"]] == ["00:09", "00:42"]
    assert payload["error"] == ""


def test_cli_batch_indexes_and_caches_episodes(run_cli, tmp_path: Path, make_vtt) -> None:
    """Batch mode writes results once and reuses them unless forced."""
    _stage_episode(tmp_path, "2", "Second", make_vtt)
    _stage_episode(tmp_path, "1", "First", make_vtt)
    (tmp_path / "3.No captions.vid.description").write_text(DESCRIPTION, encoding="utf-8")

    code, output = run_cli(["--meta-dir", str(tmp_path)])

    assert code == 0
    assert output.index("First") < output.index("Second")
    assert "1/2 questions found" in output
    assert not (tmp_path / "3.No captions.vid.results.json").exists()
    results_path = tmp_path / "1.First.vid.results.json"
    payload = json.loads(results_path.read_text(encoding="utf-8"))
    assert payload["timestamps"][0]["start"] == 60.0

    results_path.write_text(json.dumps({"timestamps": [], "error": "cached"}), encoding="utf-8")
    _, cached_output = run_cli(["--meta-dir", str(tmp_path), "--title-filter", "first"])
    assert "First: cached" in cached_output
    assert "Second" not in cached_output

    _, forced_output = run_cli(["--meta-dir", str(tmp_path), "--title-filter", "first", "--force"])
    assert "First: 1/2 questions found" in forced_output


def test_cli_batch_missing_directory_exits_one(run_cli, tmp_path: Path) -> None:
    code, _ = run_cli(["--meta-dir", str(tmp_path / "absent")])

    assert code == 1
