"""Every public package imports cleanly on its own in a fresh interpreter."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parent.parent / "src"


@pytest.mark.parametrize(
    "module",
    [
        "safeguard.classify",
        "safeguard.classify.contextual",
        "safeguard.classify.text",
        "safeguard.classify.media",
        "safeguard.content",
        "safeguard.content.models",
        "safeguard.content.lifecycle",
        "safeguard.cli",
    ],
)
def test_imports_first(module: str) -> None:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        capture_output=True,
        text=True,
        env=env,
    )
    assert result.returncode == 0, result.stderr
