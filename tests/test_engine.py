"""Tests for the scan/clean engine."""

from __future__ import annotations

import pytest

from cargo_clean_all.config import CleanAllConfig, ConfigError
from cargo_clean_all.core.engine import CleanAllEngine

MB = 1000**2


@pytest.fixture
def workspace(root, make_project):
    make_project(root / "fresh", target_size=10 * MB, age_days=0)
    make_project(root / "stale", target_size=300 * MB, age_days=30)
    make_project(root / "mid", target_size=60 * MB, age_days=10)
    make_project(root / "no-target", with_target=False)
    make_project(root / "vendor" / "dep", target_size=900 * MB, age_days=90)
    return root


def _engine(root, **kwargs) -> CleanAllEngine:
    return CleanAllEngine(CleanAllConfig(root_dir=root, **kwargs))


class TestCleanAllEngine:
    def test_scan_sorts_by_size_and_drops_projects_without_target(self, workspace):
        projects = _engine(workspace).scan()
        assert [p.name for p in projects] == ["fresh", "mid", "stale", "dep"]

    @pytest.mark.parametrize("threads", [1, 3])
    def test_scan_with_thread_count(self, workspace, threads):
        projects = _engine(workspace, threads=threads).scan()
        assert len(projects) == 4

    def test_scan_honours_skip(self, workspace):
        projects = _engine(workspace, skip=[workspace / "vendor"]).scan()
        assert "dep" not in [p.name for p in projects]

    def test_scan_honours_depth(self, workspace):
        projects = _engine(workspace, max_depth=2).scan()
        assert [p.name for p in projects] == ["fresh", "mid", "stale"]

    def test_progress_callback(self, workspace):
        events: list[tuple[str, str]] = []
        _engine(workspace).scan(on_progress=lambda phase, status: events.append((phase, status)))
        assert events[0] == ("discover", "scanning")
        assert ("discover", "found 5 projects") in events
        assert events[-1] == ("analyze", "done")

    def test_preselect_applies_policy(self, workspace):
        engine = _engine(workspace, keep_size=50 * MB, keep_days=7, ignore=[workspace / "vendor"])
        projects = engine.scan()

        flags = engine.preselect(projects)

        assert {p.name: f for p, f in zip(projects, flags)} == {
            "fresh": False,
            "mid": True,
            "stale": True,
            "dep": False,
        }

    def test_select_and_clean(self, workspace):
        engine = _engine(workspace)
        projects = engine.scan()

        to_clean, kept = engine.select(projects, [1, 2])
        report = engine.clean(to_clean)

        assert [p.name for p in to_clean] == ["mid", "stale"]
        assert [p.name for p in kept] == ["fresh", "dep"]
        assert report.reclaimed_bytes == 360 * MB
        assert not (workspace / "mid" / "target").exists()
        assert not (workspace / "stale" / "target").exists()
        assert (workspace / "fresh" / "target").exists()

    def test_clean_ignores_unselected(self, workspace):
        engine = _engine(workspace)
        projects = engine.scan()

        report = engine.clean(projects)

        assert report.outcomes == []
        assert all(p.target_dir.exists() for p in projects)

    def test_verbose_errors_reach_callback(self, workspace, monkeypatch):
        import cargo_clean_all.core.discovery as discovery

        real_scandir = discovery.os.scandir
        vendor = str(workspace / "vendor")

        def _scandir(path):
            if str(path) == vendor:
                raise PermissionError(13, "Permission denied", vendor)
            return real_scandir(path)

        monkeypatch.setattr(discovery.os, "scandir", _scandir)
        errors = []

        engine = CleanAllEngine(CleanAllConfig(root_dir=workspace), on_error=lambda p, e: errors.append(p))
        projects = engine.scan()

        assert len(projects) == 3
        assert errors == [workspace / "vendor"]


class TestConfig:
    def test_defaults_are_valid(self, root):
        CleanAllConfig(root_dir=root).validate()

    def test_missing_root(self, tmp_path):
        with pytest.raises(ConfigError):
            CleanAllConfig(root_dir=tmp_path / "missing").validate()

    def test_root_is_file(self, tmp_path):
        path = tmp_path / "file"
        path.write_text("")
        with pytest.raises(ConfigError):
            CleanAllConfig(root_dir=path).validate()

    @pytest.mark.parametrize("field", ["keep_size", "keep_days", "threads", "max_depth"])
    def test_negative_numbers(self, root, field):
        with pytest.raises(ConfigError):
            CleanAllConfig(root_dir=root, **{field: -1}).validate()
