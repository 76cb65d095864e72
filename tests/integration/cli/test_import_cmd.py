"""Integration tests for the import, plan, init, and tree commands"""

import pytest
from typer.testing import CliRunner

from mdimport.cli.cli import app
from mdimport.config import Settings


runner = CliRunner()


@pytest.fixture(autouse=True)
def _workspace(tmp_path, monkeypatch):
    """Run every command from tmp_path against tmp_path/test.db."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(f"MDIMPORT_{name.upper()}", raising=False)
    monkeypatch.setenv("MDIMPORT_DB_URL", f"sqlite:///{tmp_path}/test.db")


def test_import_then_tree(site_dir):
    """import reports every page in creation order; tree shows the stored hierarchy."""
    result = runner.invoke(app, ["import", str(site_dir), "--root-id", "1"])
    assert result.exit_code == 0, result.output
    assert "Found 6 page(s) to import." in result.output
    assert "[1/6] Home ✓" in result.output
    assert "[5/6] Team ✓" in result.output
    assert "6 pages imported successfully." in result.output

    tree = runner.invoke(app, ["tree", "--root-id", "1"])
    assert tree.exit_code == 0, tree.output
    assert tree.output.splitlines() == [
        "Home (/) [1 block(s)]",
        "About us (/about) [4 block(s)]",
        "  Team (/about/team) [1 block(s)]",
        "  History (/about/history) [1 block(s)]",
        "Contact (/contact) [1 block(s)]",
        "Imprint (/imprint) [1 block(s)]",
    ]


def test_import_rooted(site_dir):
    result = runner.invoke(app, ["import", str(site_dir), "--hierarchy", "rooted"])
    assert result.exit_code == 0, result.output
    assert "(rooted hierarchy)" in result.output

    tree = runner.invoke(app, ["tree"])
    assert tree.output.splitlines()[:3] == [
        "Home (/) [1 block(s)]",
        "  About us (/about) [4 block(s)]",
        "    Team (/about/team) [1 block(s)]",
    ]


def test_import_dry_run_stores_nothing(site_dir):
    result = runner.invoke(app, ["import", str(site_dir), "--dry-run"])
    assert result.exit_code == 0, result.output
    assert "(dry run, nothing stored)" in result.output

    tree = runner.invoke(app, ["tree"])
    assert tree.exit_code == 1
    assert "No pages found." in tree.output


def test_import_missing_directory(tmp_path):
    result = runner.invoke(app, ["import", str(tmp_path / "nope")])
    assert result.exit_code == 1
    assert "Directory not found" in result.output


def test_import_empty_directory(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    (empty / "readme.txt").write_text("x")
    result = runner.invoke(app, ["import", str(empty)])
    assert result.exit_code == 1
    assert "No Markdown files found" in result.output


def test_import_malformed_file_aborts_before_writing(site_dir):
    (site_dir / "broken.md").write_text("# No front matter\n")
    result = runner.invoke(app, ["import", str(site_dir)])
    assert result.exit_code == 1
    assert "Parse failed" in result.output
    assert "broken.md" in result.output

    assert runner.invoke(app, ["tree"]).exit_code == 1


def test_import_reports_unresolved_parent(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "orphan.md").write_text("---\ntitle: Orphan\nslug: x/orphan\nparent: /x\n---\n")
    result = runner.invoke(app, ["import", str(src), "--fallback-id", "1"])
    assert result.exit_code == 0, result.output
    assert "parent of 'Orphan' not found; placed in container 1" in result.output


def test_import_invalid_hierarchy(site_dir):
    result = runner.invoke(app, ["import", str(site_dir), "--hierarchy", "sideways"])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_plan_lists_order_and_classes(site_dir):
    result = runner.invoke(app, ["plan", str(site_dir)])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "  1. Home  [root, parent -, 1 block(s)]"
    assert lines[1] == "  2. About us  [root, parent -, 4 block(s)]"
    assert lines[4] == "  5.   Team  [subpage, parent /about, 1 block(s)]"
    assert len(lines) == 6


def test_plan_rooted_sections(site_dir):
    result = runner.invoke(app, ["plan", str(site_dir), "--hierarchy", "rooted"])
    assert result.exit_code == 0, result.output
    assert "About us  [section, parent -, 4 block(s)]" in result.output


def test_init_and_reset(tmp_path):
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    assert "Database initialized at:" in result.output
    assert (tmp_path / "test.db").exists()

    result = runner.invoke(app, ["init", "--reset"])
    assert result.exit_code == 0, result.output
    assert "Existing data cleared." in result.output


def test_invalid_config_yaml(tmp_path, site_dir):
    (tmp_path / "config.yaml").write_text("root_id: [oops\n")
    result = runner.invoke(app, ["import", str(site_dir)])
    assert result.exit_code == 1
    assert "Invalid config.yaml" in result.output


def test_unknown_parser_preset_stops_before_writing(tmp_path, site_dir, monkeypatch):
    monkeypatch.setenv("MDIMPORT_PARSER_CONFIG", "gfm")
    result = runner.invoke(app, ["import", str(site_dir)])
    assert result.exit_code == 1
    assert "unknown markdown-it preset 'gfm'" in result.output
    assert not (tmp_path / "test.db").exists()


def test_second_import_keeps_runs_contiguous(site_dir):
    """Each run's pages are placed ahead of earlier ones, in nav order."""
    for _ in range(2):
        result = runner.invoke(app, ["import", str(site_dir)])
        assert result.exit_code == 0, result.output

    top = [line for line in runner.invoke(app, ["tree"]).output.splitlines() if not line.startswith(" ")]
    run = ["Home (/) [1 block(s)]", "About us (/about) [4 block(s)]",
           "Contact (/contact) [1 block(s)]", "Imprint (/imprint) [1 block(s)]"]
    assert top == run + run
