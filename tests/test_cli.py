import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from cardviewer.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / "cardviewer.yml"


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def _invoke(runner, settings_file, *args, **kwargs):
    return runner.invoke(cli, ["--settings", str(settings_file), *args], **kwargs)


def test_parse_prints_record(runner, settings_file, tmp_path):
    block = _write(tmp_path, "card.txt", "title: Inception\nrating: 8.8\nruntime: 148 min\n")
    result = _invoke(runner, settings_file, "parse", "movie", str(block))
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "type": "movie", "title": "Inception", "rating": 8.8, "runtime": 148,
    }


def test_parse_yaml_format(runner, settings_file, tmp_path):
    block = _write(tmp_path, "card.txt", "title: Dune\n")
    result = _invoke(runner, settings_file, "parse", "book", str(block), "--format", "yaml")
    assert yaml.safe_load(result.output) == {"type": "book", "title": "Dune"}


def test_card_html_output_with_vault(runner, settings_file, tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    (vault / "p.jpg").write_bytes(b"x")
    block = _write(vault, "card.txt", "title: X\nposter: ./p.jpg\n")
    result = _invoke(
        runner, settings_file, "--vault", str(vault), "--base-url", "/media",
        "card", "movie", str(block), "--format", "html",
    )
    assert result.exit_code == 0, result.output
    assert 'src="/media/p.jpg"' in result.output
    assert 'class="card-viewer-card"' in result.output


def test_images_json(runner, settings_file, tmp_path):
    block = _write(tmp_path, "imgs.txt", "![a](a.png)")
    result = _invoke(runner, settings_file, "images", str(block))
    tree = json.loads(result.output)
    assert tree["classes"] == ["imgs-grid-container"]


def test_html_rewrite_and_render(runner, settings_file, tmp_path):
    fragment = _write(tmp_path, "frag.html", '<a href="x.png">x</a><img src="pic.png">')
    result = _invoke(runner, settings_file, "html", str(fragment))
    assert result.output.strip() == '<a href="x.png">x</a><img src="pic.png">'

    rendered = _invoke(runner, settings_file, "html", str(fragment), "--render", "--format", "html")
    assert rendered.output.startswith('<div class="html-viewer-container">')


def test_html_render_refused_when_disabled(runner, settings_file, tmp_path):
    settings_file.write_text("enable_html_parsing: false\n", encoding="utf-8")
    fragment = _write(tmp_path, "frag.html", "<p>x</p>")
    result = _invoke(runner, settings_file, "html", str(fragment), "--render")
    assert result.exit_code != 0
    assert "disabled" in result.output


def test_document_to_page(runner, settings_file, tmp_path):
    note = _write(tmp_path, "note.md", "# Hi\n\n```card-music\ntitle: Song\nduration: 185\n```\n")
    out = tmp_path / "out" / "note.html"
    result = _invoke(runner, settings_file, "document", str(note), "--out", str(out))
    assert result.exit_code == 0, result.output
    page = out.read_text(encoding="utf-8")
    assert "<title>note</title>" in page
    assert "3:05" in page


def test_settings_show(runner, settings_file):
    result = _invoke(runner, settings_file, "--locale", "zh", "settings", "show", "--format", "json")
    assert json.loads(result.output)["locale"] == "zh"


def test_disable_html_declined(runner, settings_file):
    result = _invoke(runner, settings_file, "settings", "html", "--disable", input="n\n")
    assert result.exit_code == 0, result.output
    assert "Unchanged" in result.output
    assert not settings_file.exists()


def test_disable_html_confirmed(runner, settings_file):
    result = _invoke(runner, settings_file, "settings", "html", "--disable", input="y\n")
    assert result.exit_code == 0, result.output
    assert "HTML parsing disabled" in result.output
    assert yaml.safe_load(settings_file.read_text(encoding="utf-8"))["enable_html_parsing"] is False

    enabled = _invoke(runner, settings_file, "settings", "html", "--enable")
    assert "HTML parsing enabled" in enabled.output
    assert yaml.safe_load(settings_file.read_text(encoding="utf-8"))["enable_html_parsing"] is True


def test_site_command(runner, settings_file, tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    (vault / "a.md").write_text("# A\n", encoding="utf-8")
    result = _invoke(runner, settings_file, "site", str(vault), str(tmp_path / "site"))
    assert result.exit_code == 0, result.output
    assert "Built 1 pages" in result.output

    bad = _invoke(runner, settings_file, "site", str(vault), str(vault / "out"))
    assert bad.exit_code != 0


def test_card_builder_failure_prints_error_node(runner, settings_file, tmp_path, monkeypatch):
    from cardviewer.cards import layout

    def broken(info, card):
        raise RuntimeError("broken rating")

    monkeypatch.setattr(layout, "_render_rating", broken)
    block = _write(tmp_path, "card.txt", "title: X\n")
    result = _invoke(runner, settings_file, "card", "movie", str(block))
    assert result.exit_code == 0, result.output
    tree = json.loads(result.output)
    assert tree["classes"] == ["card-viewer-error"]
    assert tree["text"] == "Failed to render movie card: broken rating"


def test_command_line_overrides_are_not_saved(runner, settings_file, tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    result = _invoke(
        runner, settings_file, "--vault", str(vault), "--locale", "zh",
        "settings", "html", "--disable", "--yes",
    )
    assert result.exit_code == 0, result.output
    saved = yaml.safe_load(settings_file.read_text(encoding="utf-8"))
    assert saved["enable_html_parsing"] is False
    assert saved["vault"] is None
    assert saved["locale"] == "en"
