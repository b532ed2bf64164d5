"""Tests for composer.json analysis."""

import json
from pathlib import Path

import pytest

from phpci.test_action.detectors.composer import ComposerAnalyzer, find_file_upwards
from phpci.test_action.errors import ComposerManifestNotFoundError, PipelineFatalError


def write_composer(directory: Path, data: dict[str, object]) -> Path:
    """Write composer.json into directory."""
    path = directory / "composer.json"
    path.write_text(json.dumps(data))
    return path


def test_analyze_reads_manifest(tmp_path: Path) -> None:
    """The manifest's dependencies, scripts and type are exposed."""
    write_composer(
        tmp_path,
        {
            "name": "acme/app",
            "type": "library",
            "require": {"php": "^8.2"},
            "require-dev": {"phpunit/phpunit": "^10.5"},
            "scripts": {"test": "phpunit"},
        },
    )
    analyzer = ComposerAnalyzer()

    analyzer.analyze(tmp_path)

    assert analyzer.project_dir == tmp_path.resolve()
    assert analyzer.has_dependency("phpunit/phpunit")
    assert analyzer.has_dependency("php")
    assert not analyzer.has_dependency("pestphp/pest")
    assert analyzer.dependencies() == ["php", "phpunit/phpunit"]
    assert analyzer.has_script("test")
    assert analyzer.project_type() == "library"


def test_analyze_walks_upwards(tmp_path: Path) -> None:
    """composer.json is found in a parent directory."""
    write_composer(tmp_path, {"name": "acme/app"})
    nested = tmp_path / "packages" / "core"
    nested.mkdir(parents=True)
    analyzer = ComposerAnalyzer()

    analyzer.analyze(nested)

    assert analyzer.composer_path == (tmp_path / "composer.json").resolve()


def test_analyze_missing_manifest(tmp_path: Path) -> None:
    """A project without composer.json cannot be tested."""
    with pytest.raises(ComposerManifestNotFoundError):
        ComposerAnalyzer().analyze(tmp_path)


def test_analyze_invalid_json(tmp_path: Path) -> None:
    """An unreadable manifest is fatal."""
    (tmp_path / "composer.json").write_text("{not json")

    with pytest.raises(PipelineFatalError):
        ComposerAnalyzer().analyze(tmp_path)


def test_has_vendor_bin(tmp_path: Path) -> None:
    """Executables in vendor/bin are detected."""
    write_composer(tmp_path, {})
    (tmp_path / "vendor" / "bin").mkdir(parents=True)
    (tmp_path / "vendor" / "bin" / "pest").touch()
    analyzer = ComposerAnalyzer()
    analyzer.analyze(tmp_path)

    assert analyzer.has_vendor_bin("pest")
    assert not analyzer.has_vendor_bin("phpunit")


def test_unanalyzed_analyzer_answers_negatively() -> None:
    """Before analysis nothing is reported."""
    analyzer = ComposerAnalyzer()

    assert not analyzer.has_dependency("phpunit/phpunit")
    assert analyzer.dependencies() == []
    assert analyzer.project_type() is None
    assert not analyzer.has_vendor_bin("phpunit")


def test_find_file_upwards_missing(tmp_path: Path) -> None:
    """None is returned when no parent has the file."""
    assert find_file_upwards("no-such-file.json", tmp_path) is None
