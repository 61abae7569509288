from cardviewer.gallery.images import ImageRef, parse_images


def test_parse_images_in_order_with_title():
    images = parse_images('![a](./i1.png) text ![b](../i2.jpg "T")')
    assert images == [
        ImageRef(src="./i1.png", alt="a", title=""),
        ImageRef(src="../i2.jpg", alt="b", title="T"),
    ]


def test_empty_alt_and_surrounding_prose():
    images = parse_images("Look:\n![](pics/cat.webp)\nthat's all")
    assert len(images) == 1
    assert images[0].alt == ""
    assert images[0].src == "pics/cat.webp"


def test_malformed_markup_is_skipped():
    assert parse_images("![a](has space.png) ![b](missing-paren.png") == []
    assert parse_images("[not an image](x.png)") == []


def test_no_images():
    assert parse_images("") == []
    assert parse_images(None) == []
