from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def repo_root() -> Path:
    # tests/workflow/ -> tests -> repo_root
    return Path(__file__).resolve().parents[2]


@pytest.fixture(scope="session")
def venv_python(repo_root: Path) -> str:
    posix_path = repo_root / ".venv" / "bin" / "python"
    win_path = repo_root / ".venv" / "Scripts" / "python.exe"
    if posix_path.exists():
        return str(posix_path)
    if win_path.exists():
        return str(win_path)
    return sys.executable


@pytest.fixture
def tmp_db_url(tmp_path: Path) -> str:
    return f"sqlite:///{(tmp_path / 'post_tags_e2e.db').as_posix()}"


def run_cli(args: list[str], cwd: Path, env: dict | None = None) -> subprocess.CompletedProcess:
    merged_env = dict(os.environ)
    # Ensure Python can import modules from the repo root (db/, scripts/)
    py_path = merged_env.get("PYTHONPATH", "")
    if str(cwd) not in (py_path.split(os.pathsep) if py_path else []):
        merged_env["PYTHONPATH"] = py_path + (os.pathsep if py_path else "") + str(cwd)
    if env:
        merged_env.update(env)
    return subprocess.run(args, cwd=str(cwd), capture_output=True, text=True, env=merged_env)


@pytest.fixture
def cli(repo_root: Path):
    def _runner(argv: list[str], env: dict | None = None):
        return run_cli(argv, repo_root, env=env)
    return _runner
