from pathlib import Path

import pytest
import yaml

from cardviewer.assets.store import MappingStore
from cardviewer.plugin.host import CardViewerHost, HostError, ProcessorRegistry
from cardviewer.plugin.settings import Settings, load_settings


def _host(tmp_path: Path, **settings) -> CardViewerHost:
    host = CardViewerHost(MappingStore(), Settings(**settings), tmp_path / "cardviewer.yml")
    host.load()
    return host


def test_load_registers_card_and_html_processors(tmp_path: Path):
    host = _host(tmp_path)
    assert sorted(host.registry.languages()) == [
        "card-book", "card-movie", "card-music", "card-tv", "html",
    ]
    assert host.html_processor_registered


def test_html_processor_skipped_when_disabled(tmp_path: Path):
    host = _host(tmp_path, enable_html_parsing=False)
    assert len(host.registry) == 4
    assert not host.html_processor_registered


def test_registry_rejects_duplicates():
    registry = ProcessorRegistry()
    registry.register("card-movie", lambda source, source_dir: None)
    with pytest.raises(HostError):
        registry.register("card-movie", lambda source, source_dir: None)


def test_disable_cancelled_changes_nothing(tmp_path: Path):
    host = _host(tmp_path)
    asked = []

    def decline(title, message):
        asked.append(title)
        return False

    assert host.set_html_parsing(False, decline) is False
    assert asked == ["Disable HTML parsing"]
    assert host.settings.enable_html_parsing is True
    assert host.html_processor_registered
    assert not (tmp_path / "cardviewer.yml").exists()


def test_disable_confirmed_saves_and_restarts(tmp_path: Path):
    host = _host(tmp_path)
    assert host.set_html_parsing(False, lambda title, message: True) is True

    assert host.settings.enable_html_parsing is False
    assert not host.html_processor_registered
    assert host.is_loaded
    assert "card-movie" in host.registry
    saved = yaml.safe_load((tmp_path / "cardviewer.yml").read_text(encoding="utf-8"))
    assert saved["enable_html_parsing"] is False


def test_enable_applies_immediately_without_confirmation(tmp_path: Path):
    host = _host(tmp_path, enable_html_parsing=False)

    def never(title, message):
        raise AssertionError("enabling must not ask")

    assert host.set_html_parsing(True, never) is True
    assert host.html_processor_registered
    saved = yaml.safe_load((tmp_path / "cardviewer.yml").read_text(encoding="utf-8"))
    assert saved["enable_html_parsing"] is True


def test_update_html_processor_is_idempotent(tmp_path: Path):
    host = _host(tmp_path)
    host.update_html_processor()
    assert host.registry.languages().count("html") == 1


def test_unload_clears_state(tmp_path: Path):
    host = _host(tmp_path)
    host.unload()
    assert len(host.registry) == 0
    assert not host.html_processor_registered
    assert not host.is_loaded


def test_card_processor_renders(tmp_path: Path):
    host = _host(tmp_path)
    node = host.registry.get("card-movie")("title: Inception\nid: 27205", "")
    assert node.attrs["data-card-type"] == "movie"


def test_messages_follow_locale(tmp_path: Path):
    host = _host(tmp_path, locale="zh")
    node = host.registry.get("card-book")("", "")
    assert node.find(cls="card-viewer-title").text == "未命名"


def test_disable_survives_environment_overrides(tmp_path: Path, monkeypatch):
    path = tmp_path / "cardviewer.yml"
    monkeypatch.setenv("CARDVIEWER_LOCALE", "fr")
    monkeypatch.setenv("CARDVIEWER_BASE_URL", "/cdn")
    host = CardViewerHost(MappingStore(), load_settings(path), path)
    host.load()
    assert host.set_html_parsing(False, lambda title, message: True) is True

    monkeypatch.delenv("CARDVIEWER_LOCALE")
    monkeypatch.delenv("CARDVIEWER_BASE_URL")
    reloaded = load_settings(path)
    assert reloaded.enable_html_parsing is False
    assert reloaded.locale == "en"
    assert reloaded.base_url is None
