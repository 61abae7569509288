import cardviewer
from cardviewer.cards import layout
from cardviewer.gallery import grid
from cardviewer.assets.store import MappingStore
from cardviewer.render import parse_images, parse_record, render_card, render_image_grid, rewrite_html


def test_render_card_without_store_passes_paths_through():
    node = render_card("movie", "title: X\nposter: ./p.jpg")
    assert node.find(tag="img").attrs["src"] == "./p.jpg"


def test_render_card_with_store_and_source_dir():
    store = MappingStore({"notes/p.jpg": "app://p"})
    node = render_card("movie", "poster: ./p.jpg", store, source_dir="notes")
    assert node.find(tag="img").attrs["src"] == "app://p"


def test_locale_applies_to_labels():
    node = render_card("movie", "region: 中国", locale="zh")
    assert node.find(cls="card-viewer-title").text == "未命名"
    assert node.find(cls="card-viewer-label").text == "地区: "


def test_render_image_grid_and_rewrite():
    store = MappingStore({"a.png": "app://a"})
    node = render_image_grid("![x](a.png)", store)
    assert node.find(tag="img").attrs["src"] == "app://a"
    assert rewrite_html('<img src="a.png">', store) == '<img src="app://a">'
    assert rewrite_html('<img src="a.png">') == '<img src="a.png">'


def test_parsers():
    assert parse_record("tv", "title: T", locale="zh").title == "T"
    assert parse_record("tv", "", locale="zh").title == "未命名"
    assert [i.src for i in parse_images("![](a.png)![](b.png)")] == ["a.png", "b.png"]


def test_package_exports():
    assert cardviewer.__version__ == "0.1.0"
    assert cardviewer.render_card is render_card
    assert cardviewer.MappingStore is MappingStore


def test_card_builder_failure_yields_one_error_node(monkeypatch):
    def broken(info, card):
        raise RuntimeError("broken rating")

    monkeypatch.setattr(layout, "_render_rating", broken)
    node = render_card("movie", "title: X")
    assert node.classes == ["card-viewer-error"]
    assert node.text == "Failed to render movie card: broken rating"
    assert node.children == []


def test_grid_builder_failure_yields_one_error_node(monkeypatch):
    def broken(image, resolver, messages):
        raise RuntimeError("bad item")

    monkeypatch.setattr(grid, "build_image_item", broken)
    node = render_image_grid("![x](a.png)", locale="zh")
    assert node.classes == ["card-viewer-error"]
    assert node.text == "图片网格渲染失败: bad item"
