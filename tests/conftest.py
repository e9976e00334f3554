# ruff: noqa: E402

import sys
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import beadview.log as beadview_log
import beadview.paths as paths

DOCTEST_MODULES = {
    ROOT / "src" / "beadview" / "__init__.py",
    ROOT / "src" / "beadview" / "config.py",
    ROOT / "src" / "beadview" / "io.py",
    ROOT / "src" / "beadview" / "log.py",
    ROOT / "src" / "beadview" / "merge.py",
    ROOT / "src" / "beadview" / "models.py",
    ROOT / "src" / "beadview" / "namespace.py",
    ROOT / "src" / "beadview" / "paths.py",
    ROOT / "src" / "beadview" / "planning.py",
    ROOT / "src" / "beadview" / "triage.py",
}


@pytest.fixture(autouse=True)
def _isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> None:
    config_home = tmp_path_factory.mktemp("config")
    monkeypatch.setenv(paths.CONFIG_DIR_ENV, str(config_home))
    monkeypatch.delenv("BEADVIEW_LOG_LEVEL", raising=False)
    monkeypatch.setattr(beadview_log, "_settings", beadview_log.LogSettings())


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
