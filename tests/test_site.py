from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from cardviewer.plugin.settings import Settings
from cardviewer.site import SiteError, build_site, page_base_url


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    (root / "notes").mkdir(parents=True)
    (root / ".obsidian").mkdir()
    (root / ".obsidian" / "app.json").write_text("{}", encoding="utf-8")
    (root / "cover.png").write_bytes(b"png")
    (root / "notes" / "still.jpg").write_bytes(b"jpg")
    (root / "index.md").write_text(
        "# Home\n\n```card-movie\ntitle: Inception\nposter: cover.png\n```\n", encoding="utf-8"
    )
    (root / "notes" / "trip.md").write_text(
        "# Trip\n\n```imgs\n![still](./still.jpg) ![remote](https://x.com/r.png)\n```\n",
        encoding="utf-8",
    )
    return root


def test_page_base_url():
    assert page_base_url(Path("index.md")) == "."
    assert page_base_url(Path("a/b/c.md")) == "../.."


def test_build_site_writes_pages_and_assets(vault: Path, tmp_path: Path):
    out = tmp_path / "site"
    assert build_site(vault, out) == 2

    assert (out / "cover.png").read_bytes() == b"png"
    assert (out / "notes" / "still.jpg").exists()
    assert not (out / ".obsidian").exists()

    home = BeautifulSoup((out / "index.html").read_text(encoding="utf-8"), "html.parser")
    assert home.title.get_text() == "index"
    assert home.find("img", class_="card-viewer-poster")["src"] == "./cover.png"

    trip = BeautifulSoup((out / "notes" / "trip.html").read_text(encoding="utf-8"), "html.parser")
    srcs = [img["src"] for img in trip.find_all("img", class_="imgs-grid-image")]
    assert srcs == ["../notes/still.jpg", "https://x.com/r.png"]


def test_build_site_absolute_base_url(vault: Path, tmp_path: Path):
    build_site(vault, tmp_path / "site", Settings(base_url="https://cdn.example.com/vault"))
    page = (tmp_path / "site" / "notes" / "trip.html").read_text(encoding="utf-8")
    assert 'src="https://cdn.example.com/vault/notes/still.jpg"' in page


def test_build_site_locale(vault: Path, tmp_path: Path):
    build_site(vault, tmp_path / "site", Settings(locale="zh"))
    page = (tmp_path / "site" / "index.html").read_text(encoding="utf-8")
    assert '<html lang="zh">' in page


def test_build_site_rejects_bad_paths(vault: Path, tmp_path: Path):
    with pytest.raises(SiteError):
        build_site(tmp_path / "missing", tmp_path / "site")
    with pytest.raises(SiteError):
        build_site(vault, vault / "_site")


def test_clean_removes_stale_output(vault: Path, tmp_path: Path):
    out = tmp_path / "site"
    out.mkdir()
    (out / "stale.html").write_text("old", encoding="utf-8")
    build_site(vault, out, clean=True)
    assert not (out / "stale.html").exists()
    assert (out / "index.html").exists()
