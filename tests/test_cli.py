"""End-to-end tests for the build-docs command."""

import json

from builddocs.cli import build, main
from builddocs.config import load_options
from helpers import block


def test_build_runs_the_whole_pipeline(source_tree):
    result = build(load_options(target_path=str(source_tree)))
    assert len(result.sources) == 2
    assert len(result.raw_comments) == 2
    assert [ns.description for ns in result.linked.namespaces] == ["Lib"]
    assert len(result.elements) == 1
    assert result.validation.errors == []


def test_main_writes_outputs(source_tree, tmp_path, capsys):
    out = tmp_path / "out"
    code = main([str(source_tree), "--out", str(out), "--name", "lib", "--format", "json", "--format", "md", "--format", "html"])

    assert code == 0
    written = sorted(p.name for p in out.iterdir())
    assert written == [
        "elements.json",
        "files.json",
        "lib.html",
        "lib.json",
        "lib.md",
        "modules.json",
        "namespaces.json",
        "processed.json",
    ]
    namespaces = json.loads((out / "namespaces.json").read_text())
    assert [ns["description"] for ns in namespaces] == ["Lib"]
    assert "## Lib" in (out / "lib.md").read_text()

    stdout = capsys.readouterr().out
    assert "✓ 2 files, 2 comment blocks" in stdout
    assert "Done!" in stdout


def test_single_format(source_tree, tmp_path):
    out = tmp_path / "out"
    assert main([str(source_tree), "--out", str(out), "--format", "html"]) == 0
    assert [p.name for p in out.iterdir()] == ["docs.html"]


def test_missing_target_fails(tmp_path, capsys):
    assert main([str(tmp_path / "missing"), "--out", str(tmp_path / "out")]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_bad_config_fails(tmp_path, capsys):
    config = tmp_path / "config.json"
    config.write_text("{")
    assert main(["--config", str(config)]) == 1
    assert "Invalid JSON" in capsys.readouterr().err


class TestStrict:
    def _write_orphan(self, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.ts").write_text(block("@namespace {Lib}", "@summary Lib."))
        (src / "b.ts").write_text(block("@memberof module:Missing", "@summary Orphan."))
        return src

    def test_unresolved_reference_warns(self, tmp_path, capsys):
        src = self._write_orphan(tmp_path)
        assert main([str(src), "--out", str(tmp_path / "out")]) == 0
        assert "module:Missing" in capsys.readouterr().err

    def test_strict_fails(self, tmp_path, capsys):
        src = self._write_orphan(tmp_path)
        out = tmp_path / "out"
        assert main([str(src), "--out", str(out), "--strict"]) == 1
        assert "Validation errors" in capsys.readouterr().out
        assert not out.exists()
