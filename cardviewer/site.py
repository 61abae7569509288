"""Static site export of a vault.

Every Markdown note becomes ``<out_dir>/<relative path>.html``; every other
file is copied alongside so asset locators can stay relative to each page.
"""

import html
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from cardviewer.assets.store import VaultStore
from cardviewer.plugin.blocks import render_document
from cardviewer.plugin.host import CardViewerHost
from cardviewer.plugin.settings import Settings

logger = logging.getLogger(__name__)

TEMPLATE_PATH = Path(__file__).parent / "templates" / "page.html"
CONTENT_INJECTION_POINT = "<!-- CONTENT_INJECTION_POINT -->"


class SiteError(Exception):
    """Site export failed."""
    pass


def _read_text(path: Path) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)


def _vault_files(vault: Path) -> list[Path]:
    return sorted(
        p for p in vault.rglob("*")
        if p.is_file() and not _is_hidden(p.relative_to(vault))
    )


def page_base_url(relative: Path) -> str:
    """Relative prefix from a page back to the vault root."""
    depth = len(relative.parts) - 1
    return "/".join([".."] * depth) if depth else "."


def fill_template(template: str, *, title: str, body: str, locale: str, generation_date: str) -> str:
    return (
        template.replace(CONTENT_INJECTION_POINT, body)
        .replace("{TITLE}", html.escape(title))
        .replace("{LANG}", locale)
        .replace("{GENERATION_DATE}", generation_date)
    )


def render_page(
    vault: Path,
    note: Path,
    settings: Settings,
    template: str,
    generation_date: str,
) -> str:
    """Render one note of ``vault`` into a full HTML page."""
    relative = note.relative_to(vault)
    base_url = settings.base_url or page_base_url(relative)
    host = CardViewerHost(VaultStore(vault, base_url=base_url), settings)
    host.load()
    try:
        source_dir = relative.parent.as_posix()
        body = render_document(host, _read_text(note), "" if source_dir == "." else source_dir)
    finally:
        host.unload()
    return fill_template(
        template, title=note.stem, body=body, locale=settings.locale, generation_date=generation_date
    )


def build_site(
    vault: Path,
    out_dir: Path,
    settings: Optional[Settings] = None,
    clean: bool = False,
) -> int:
    """Export ``vault`` as a static site.

    Args:
        vault: Vault directory
        out_dir: Output directory (must not be inside the vault)
        settings: Render settings (defaults if omitted)
        clean: Remove ``out_dir`` first

    Returns:
        Number of pages written

    Raises:
        SiteError: If the vault is missing or ``out_dir`` lies inside it
    """
    vault = Path(vault).resolve()
    out_dir = Path(out_dir).resolve()
    settings = settings or Settings()

    if not vault.is_dir():
        raise SiteError(f"Vault not found: {vault}")
    if out_dir == vault or vault in out_dir.parents:
        raise SiteError(f"Output directory must be outside the vault: {out_dir}")

    if clean and out_dir.exists():
        shutil.rmtree(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    template = _read_text(TEMPLATE_PATH)
    generation_date = datetime.now().strftime("%Y-%m-%d %H:%M")

    pages = 0
    for path in _vault_files(vault):
        relative = path.relative_to(vault)
        if path.suffix.lower() != ".md":
            dest = out_dir / relative
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, dest)
            continue

        page = render_page(vault, path, settings, template, generation_date)
        _write_text(out_dir / relative.with_suffix(".html"), page)
        logger.info(f"Rendered {relative}")
        pages += 1

    logger.info(f"Site built at {out_dir} with {pages} pages")
    return pages
