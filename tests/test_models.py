"""Tests for the data models."""

from __future__ import annotations

from pathlib import Path

import pytest

from cargo_clean_all.constants import ARTIFACT_DIR
from cargo_clean_all.models import CleanupOutcome, CleanupReport, DepthBudget, ProjectAnalysis


class TestDepthBudget:
    def test_zero_limit_is_unlimited(self):
        budget = DepthBudget.from_limit(0)
        assert budget.is_unlimited
        assert not budget.exhausted
        assert budget.descend() == budget

    def test_counts_down_to_exhausted(self):
        budget = DepthBudget.from_limit(2)
        assert not budget.exhausted
        assert not budget.descend().exhausted
        assert budget.descend().descend().exhausted
        assert budget.descend().descend().descend() == DepthBudget(0)

    def test_negative_limit(self):
        with pytest.raises(ValueError):
            DepthBudget.from_limit(-1)


class TestProjectAnalysis:
    def test_paths(self):
        project = ProjectAnalysis(project_path=Path("/src/my-crate"))
        assert project.name == "my-crate"
        assert project.target_dir == Path("/src/my-crate/target")
        assert project.selected is False

    def test_target_dir_uses_artifact_dir_name(self):
        project = ProjectAnalysis(project_path=Path("crate"))
        assert project.target_dir == Path("crate") / ARTIFACT_DIR


class TestCleanupReport:
    def test_reclaimed_excludes_failures(self):
        report = CleanupReport(
            outcomes=[
                CleanupOutcome(Path("/a"), expected_bytes=100),
                CleanupOutcome(Path("/b"), expected_bytes=250, error="Permission denied"),
                CleanupOutcome(Path("/c"), expected_bytes=50),
            ]
        )

        assert report.expected_bytes == 400
        assert report.reclaimed_bytes == 150
        assert [o.project_path for o in report.succeeded] == [Path("/a"), Path("/c")]
        assert [o.project_path for o in report.failed] == [Path("/b")]

    def test_preserve_errors_do_not_fail_outcome(self):
        outcome = CleanupOutcome(Path("/a"), expected_bytes=1, preserve_errors=["/a/target/debug/app: busy"])
        assert outcome.succeeded
