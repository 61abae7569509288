import json

from cardviewer.nodes import InsertErrorAfter, MarkLoaded, Node, OpenUrl, ShowLoadError


def test_walk_yields_parents():
    root = Node("div")
    child = root.el("p", cls="a b", text="hi")
    leaf = child.el("span")
    pairs = [(n.tag, p.tag if p else None) for n, p in root.walk()]
    assert pairs == [("div", None), ("p", "div"), ("span", "p")]
    assert root.find(cls="b") is child
    assert root.find(tag="span") is leaf


def test_fire_returns_action_and_applies_mutation():
    parent = Node("div")
    img = parent.el("img")
    after = parent.el("span")
    marker = Node("div", classes=["err"])
    img.on("error", InsertErrorAfter(marker))
    assert isinstance(img.fire("error", parent), InsertErrorAfter)
    assert parent.children == [img, marker, after]
    assert img.fire("nothing") is None


def test_show_load_error_and_mark_loaded():
    parent = Node("div")
    img = parent.el("img")
    img.on("error", ShowLoadError(Node("div", text="x"), hide_class="hidden", container_class="error"))
    img.on("load", MarkLoaded(cls="loaded", attr="data-loaded"))
    img.fire("error", parent)
    img.fire("load", parent)
    assert img.classes == ["hidden", "loaded"]
    assert img.attrs["data-loaded"] == "true"
    assert parent.classes == ["error"]
    assert len(parent.children) == 2


def test_to_html_escapes_and_serializes_events():
    root = Node("div", classes=["card"], attrs={"title": 'a "q"'})
    root.el("p", text="<b>not bold</b>")
    root.el("img", attrs={"src": "x.png"})
    root.on("click", OpenUrl("https://x.com/?a=1&b=2"))
    html = root.to_html()
    assert html.startswith('<div class="card" title="a &quot;q&quot;" data-cv-on-click="')
    assert "<p>&lt;b&gt;not bold&lt;/b&gt;</p>" in html
    assert '<img src="x.png">' in html
    assert "</img>" not in html


def test_raw_text_elements_are_not_escaped():
    style = Node("style")
    style.append(Node.text_node("a > b { color: red; }"))
    assert style.to_html() == "<style>a > b { color: red; }</style>"


def test_to_dict():
    root = Node("div", classes=["c"])
    root.append(Node.text_node("hi"))
    root.on("click", OpenUrl("u"))
    data = root.to_dict()
    assert data == {
        "tag": "div",
        "classes": ["c"],
        "events": {"click": {"action": "OpenUrl", "url": "u"}},
        "children": [{"text": "hi"}],
    }
    json.dumps(data)


def test_action_to_dict_serializes_marker_nodes():
    action = ShowLoadError(Node("div", classes=["m"], text="failed"), hide_class="h")
    data = action.to_dict()
    assert data["action"] == "ShowLoadError"
    assert data["marker"] == {"tag": "div", "classes": ["m"], "text": "failed"}
