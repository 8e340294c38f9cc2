import contextlib
import io
import sys
from pathlib import Path
from typing import Sequence

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import qstamp.__main__ as qstamp_main


@pytest.fixture
def make_vtt():
    """Builds a WebVTT document from (start, end, text) cues."""

    def _make_vtt(*cues: tuple[str, str, str]) -> str:
        blocks = [f"{start} --> {end}\n{text}" for start, end, text in cues]
        return "WEBVTT\n\n" + "\n\n".join(blocks) + "\n"

    return _make_vtt


@pytest.fixture
def run_cli(monkeypatch):
    """Run the qstamp CLI with a custom argv list."""

    def _run_cli(args: Sequence[str]) -> tuple[int, str]:
        argv = ["qstamp", *args]
        monkeypatch.setattr(sys, "argv", argv)
        monkeypatch.setattr(qstamp_main, "load_dotenv", lambda: None)
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stdout):
            try:
                qstamp_main.main()
            except SystemExit as exc:
                return exc.code, stdout.getvalue()
        return 0, stdout.getvalue()

    return _run_cli


@pytest.fixture(autouse=True)
def _silence_halo(monkeypatch):
    """Replace Halo spinners with a no-op context manager for tests."""

    class _DummyHalo:
        def __init__(self, *args, **kwargs):
            self.text = kwargs.get("text")

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    monkeypatch.setattr("qstamp.__main__.Halo", _DummyHalo, raising=False)
    monkeypatch.setattr("qstamp.utils.report.Halo", _DummyHalo, raising=False)
