#!/usr/bin/env python3
"""cardviewer CLI - render card, image grid and HTML blocks from Markdown notes."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import click
import yaml

from cardviewer import __version__
from cardviewer.assets.resolver import AssetPathResolver
from cardviewer.assets.store import VaultStore
from cardviewer.cards.record import parse_record
from cardviewer.html.block import render_html_block
from cardviewer.html.media import MediaProbe
from cardviewer.html.rewrite import rewrite_media_attributes
from cardviewer.messages import get_messages
from cardviewer.nodes import Node
from cardviewer.plugin.blocks import render_document
from cardviewer.plugin.host import CardViewerHost
from cardviewer.plugin.settings import DEFAULT_SETTINGS_FILE, SettingsError, load_settings
from cardviewer.render import render_card, render_image_grid
from cardviewer.site import TEMPLATE_PATH, SiteError, build_site, fill_template

logger = logging.getLogger(__name__)

FORMATS = ["json", "yaml", "html"]


class Context:
    """Settings and store shared by every command."""

    def __init__(self, settings, settings_path: Path):
        self.settings = settings
        self.settings_path = settings_path

    @property
    def vault(self) -> Optional[Path]:
        return Path(self.settings.vault) if self.settings.vault else None

    def store(self) -> Optional[VaultStore]:
        if self.vault is None:
            return None
        return VaultStore(self.vault, base_url=self.settings.base_url)

    def host(self) -> CardViewerHost:
        host = CardViewerHost(self.store(), self.settings, self.settings_path)
        host.load()
        return host

    def resolver(self, source_dir: str = "") -> AssetPathResolver:
        return AssetPathResolver(self.store(), source_dir)

    def source_dir_of(self, path: Path) -> str:
        """Store-relative directory of ``path`` ("" outside the vault)."""
        if self.vault is None:
            return ""
        try:
            relative = path.resolve().parent.relative_to(self.vault.resolve())
        except ValueError:
            return ""
        return "" if relative == Path(".") else relative.as_posix()


pass_context = click.make_pass_decorator(Context)


def _emit(data: Any, fmt: str) -> None:
    if fmt == "yaml":
        click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)
    else:
        click.echo(json.dumps(data, ensure_ascii=False, indent=2))


def _emit_node(node: Node, fmt: str) -> None:
    if fmt == "html":
        click.echo(node.to_html())
    else:
        _emit(node.to_dict(), fmt)


def _read(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise click.ClickException(f"Cannot read {path}: {e}")


format_option = click.option(
    "--format", "fmt", type=click.Choice(FORMATS), default="json", show_default=True, help="Output format"
)
file_argument = click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))


@click.group()
@click.version_option(version=__version__)
@click.option("--vault", type=click.Path(file_okay=False, path_type=Path), help="Vault directory assets resolve against")
@click.option("--base-url", help="Prefix for resolved asset locators (default: file:// URIs)")
@click.option(
    "--settings", "settings_path", type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_SETTINGS_FILE, show_default=True, help="Settings file",
)
@click.option("--locale", type=click.Choice(["en", "zh"]), help="Message locale")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, vault, base_url, settings_path, locale, verbose):
    """cardviewer - render card, image grid and HTML blocks.

    Cards are ``card-movie``/``card-tv``/``card-book``/``card-music`` fenced
    blocks of ``field: value`` lines; image grids are ``imgs`` blocks of
    ``![alt](src "title")`` markup.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings(settings_path)
    if vault is not None:
        settings.override("vault", str(vault))
    if base_url is not None:
        settings.override("base_url", base_url)
    if locale is not None:
        settings.override("locale", locale)
    ctx.obj = Context(settings, settings_path)


@cli.command()
@click.argument("card_type")
@file_argument
@click.option("--format", "fmt", type=click.Choice(["json", "yaml"]), default="json", show_default=True)
@pass_context
def parse(obj: Context, card_type, file, fmt):
    """Parse a card block into its record."""
    record = parse_record(card_type, _read(file), get_messages(obj.settings.locale))
    _emit(record.to_dict(), fmt)


@cli.command()
@click.argument("card_type")
@file_argument
@format_option
@pass_context
def card(obj: Context, card_type, file, fmt):
    """Render a card block."""
    node = render_card(
        card_type, _read(file), obj.store(), source_dir=obj.source_dir_of(file), locale=obj.settings.locale
    )
    _emit_node(node, fmt)


@cli.command()
@file_argument
@format_option
@pass_context
def images(obj: Context, file, fmt):
    """Render an image grid block."""
    node = render_image_grid(
        _read(file), obj.store(), source_dir=obj.source_dir_of(file), locale=obj.settings.locale
    )
    _emit_node(node, fmt)


@cli.command("html")
@file_argument
@click.option("--render", is_flag=True, help="Render the block instead of only rewriting media paths")
@format_option
@pass_context
def html_command(obj: Context, file, render, fmt):
    """Rewrite (or render) an HTML fragment."""
    resolver = obj.resolver(obj.source_dir_of(file))
    if not render:
        click.echo(rewrite_media_attributes(_read(file), resolver))
        return
    if not obj.settings.enable_html_parsing:
        raise click.ClickException("HTML parsing is disabled (see 'cardviewer settings html --enable')")
    node = render_html_block(
        _read(file), resolver, get_messages(obj.settings.locale), obj.settings.media_timeout_s
    )
    _emit_node(node, fmt)


@cli.command()
@file_argument
@click.option("--out", "out_path", type=click.Path(dir_okay=False, path_type=Path), help="Write a full page here")
@click.option("--check-media", is_flag=True, help="Probe media sources and mark failures")
@pass_context
def document(obj: Context, file, out_path, check_media):
    """Render a Markdown note with all of its blocks."""
    host = obj.host()
    probe = MediaProbe(obj.settings.media_timeout_s, base_dir=file.resolve().parent) if check_media else None
    try:
        body = render_document(host, _read(file), obj.source_dir_of(file), probe=probe)
    finally:
        host.unload()

    if out_path is None:
        click.echo(body)
        return

    page = fill_template(
        _read(TEMPLATE_PATH),
        title=file.stem,
        body=body,
        locale=obj.settings.locale,
        generation_date=datetime.now().strftime("%Y-%m-%d %H:%M"),
    )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(page, encoding="utf-8")
    click.echo(f"Wrote {out_path}")


@cli.command()
@click.argument("vault", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("out_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option("--clean", is_flag=True, help="Remove the output directory first")
@pass_context
def site(obj: Context, vault, out_dir, clean):
    """Build a static site from every note in VAULT."""
    try:
        pages = build_site(vault, out_dir, obj.settings, clean=clean)
    except SiteError as e:
        raise click.ClickException(str(e))
    click.echo(f"Built {pages} pages in {out_dir}")


@cli.group("settings")
def settings_group():
    """Settings management commands."""
    pass


@settings_group.command("show")
@click.option("--format", "fmt", type=click.Choice(["json", "yaml"]), default="yaml", show_default=True)
@pass_context
def settings_show(obj: Context, fmt):
    """Print the effective settings."""
    _emit(obj.settings.to_dict(), fmt)


@settings_group.command("html")
@click.option("--enable/--disable", default=True, help="Enable or disable HTML block parsing")
@click.option("--yes", is_flag=True, help="Don't ask before disabling")
@pass_context
def settings_html(obj: Context, enable, yes):
    """Enable or disable HTML block parsing."""
    def confirm(title: str, message: str) -> bool:
        if yes:
            return True
        return click.confirm(f"{title}\n{message}", default=False)

    host = obj.host()
    try:
        changed = host.set_html_parsing(enable, confirm)
    except SettingsError as e:
        raise click.ClickException(str(e))
    finally:
        host.unload()

    if not changed:
        click.echo("Unchanged")
        return
    click.echo(f"HTML parsing {'enabled' if enable else 'disabled'}")


if __name__ == "__main__":
    cli()
