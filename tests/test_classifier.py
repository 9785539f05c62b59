"""Tests for the name and path predicates."""

from __future__ import annotations

import sys

import pytest

from cargo_clean_all.core.classifier import (
    best_effort_canonical,
    is_artifact_dir,
    is_manifest,
    is_metadata_dir,
    matches_ignore_or_skip,
)


class TestNames:
    @pytest.mark.parametrize(("name", "expected"), [(".git", True), (".cargo", True), ("git", False), ("src", False)])
    def test_metadata_dirs(self, name, expected):
        assert is_metadata_dir(name) is expected

    def test_manifest(self):
        assert is_manifest("Cargo.toml")
        assert not is_manifest("cargo.toml")
        assert not is_manifest("Cargo.lock")

    def test_artifact_dir_needs_manifest(self):
        assert is_artifact_dir("target", True)
        assert not is_artifact_dir("target", False)
        assert not is_artifact_dir("build", True)
        assert not is_artifact_dir(".git", True)


class TestPrefixes:
    def test_matches_itself_and_children(self, root):
        (root / "a" / "b").mkdir(parents=True)

        assert matches_ignore_or_skip(root / "a", [root / "a"])
        assert matches_ignore_or_skip(root / "a" / "b", [root / "a"])
        assert not matches_ignore_or_skip(root, [root / "a"])

    def test_string_prefix_is_not_component_prefix(self, root):
        (root / "abc").mkdir()
        assert not matches_ignore_or_skip(root / "abc", [root / "ab"])

    def test_relative_paths_are_canonicalized(self, root, monkeypatch):
        (root / "a" / "b").mkdir(parents=True)
        monkeypatch.chdir(root / "a")

        assert matches_ignore_or_skip("b", [root / "a"])
        assert matches_ignore_or_skip(root / "a" / "b", ["."])

    def test_missing_paths_fall_back_to_literal(self, root):
        assert best_effort_canonical(root / "nope" / "x") == root / "nope" / "x"
        assert matches_ignore_or_skip(root / "nope" / "x", [root / "nope"])

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlinks_are_resolved(self, root):
        (root / "real").mkdir()
        (root / "link").symlink_to(root / "real", target_is_directory=True)

        assert matches_ignore_or_skip(root / "link", [root / "real"])
        assert best_effort_canonical(root / "link") == root / "real"

    def test_no_prefixes(self, root):
        assert not matches_ignore_or_skip(root, [])
