"""
Unit tests for the image extraction pipeline.
"""

import base64
from unittest.mock import patch

import pytest

from seolens.extraction.document import PageDocument
from seolens.extraction.images import ImageExtractor, parse_srcset


def _extract(make_document, html, **options):
    return ImageExtractor(make_document(html), **options).extract()


class TestParseSrcset:
    """Test cases for srcset candidate selection."""

    def test_width_descriptors_pick_largest(self):
        assert parse_srcset("a.png 320w, b.png 1024w, c.png 640w") == "b.png"

    def test_density_descriptors_pick_largest(self):
        assert parse_srcset("a.png 1x, b.png 2x") == "b.png"

    def test_ties_keep_first(self):
        assert parse_srcset("a.png 2x, b.png 2x") == "a.png"

    def test_missing_descriptor_weighs_zero(self):
        assert parse_srcset("a.png, b.png 100w") == "b.png"
        assert parse_srcset("a.png") == "a.png"

    def test_density_proxy_can_outrank_width(self):
        # 2x counts as 2000, above a real 1500w candidate
        assert parse_srcset("wide.png 1500w, dense.png 2x") == "dense.png"

    @pytest.mark.parametrize("value", [None, "", " , "])
    def test_empty(self, value):
        assert parse_srcset(value) is None


class TestImageExtractor:
    """Test cases for ImageExtractor."""

    def test_standard_img(self, make_document):
        images = _extract(make_document, '<img src="/a.png" alt="A" width="100" height="50" loading="lazy">')
        assert len(images) == 1
        image = images[0]
        assert image.resolved_url == "https://example.com/a.png"
        assert image.alt_text == "A"
        assert image.source_type == "img"
        assert (image.width, image.height) == (100, 50)
        assert image.loading == "lazy"

    def test_same_absolute_url_from_src_and_srcset_is_one_record(self, make_document):
        html = '<img src="a.png"><img srcset="b.png 1x, a.png 2x">'
        images = _extract(make_document, html)
        assert [image.resolved_url for image in images] == ["https://example.com/blog/a.png"]
        assert images[0].source_type == "img"

    def test_tiny_image_dropped(self, make_document):
        assert _extract(make_document, '<img width="5" height="5" src="track.gif">') == []

    def test_tiny_data_uri_kept(self, make_document):
        html = '<img width="5" height="5" src="data:image/gif;base64,R0lGODlhAQABAAAAACw=">'
        images = _extract(make_document, html)
        assert len(images) == 1
        assert images[0].resolved_url.startswith("data:image/gif")
        assert (images[0].width, images[0].height) == (5, 5)

    def test_tiny_filter_only_applies_to_plain_src(self, make_document):
        html = '<img width="5" height="5" data-src="/lazy.png">'
        images = _extract(make_document, html)
        assert [image.source_type for image in images] == ["img (lazy)"]

    def test_tiny_from_inline_style(self, make_document):
        assert _extract(make_document, '<img src="/t.gif" style="width: 1px; height: 1px">') == []

    def test_undeclared_dimensions_are_not_tiny(self, make_document):
        images = _extract(make_document, '<img src="/photo.jpg">')
        assert len(images) == 1
        assert (images[0].width, images[0].height) == (0, 0)

    def test_custom_threshold(self, make_document):
        html = '<img src="/a.png" width="40" height="40">'
        assert _extract(make_document, html, tiny_threshold=50) == []

    def test_inline_svg_becomes_data_uri(self, make_document):
        images = _extract(make_document, '<svg width="24" height="24"><circle r="4"></circle></svg>')
        assert len(images) == 1
        image = images[0]
        assert image.source_type == "svg (inline)"
        prefix = "data:image/svg+xml;base64,"
        assert image.resolved_url.startswith(prefix)
        decoded = base64.b64decode(image.resolved_url[len(prefix) :]).decode("utf-8")
        assert decoded.startswith("<svg")
        assert "<circle" in decoded

    def test_srcset_beats_lazy_and_src(self, make_document):
        html = '<img srcset="/s.png 100w" data-src="/lazy.png" src="/src.png">'
        images = _extract(make_document, html)
        assert [(i.resolved_url, i.source_type) for i in images] == [("https://example.com/s.png", "img (srcset)")]

    def test_data_srcset(self, make_document):
        images = _extract(make_document, '<img data-srcset="/x.png 2x">')
        assert images[0].source_type == "img (srcset)"

    def test_lazy_attribute_priority(self, make_document):
        html = '<img data-image="/image.png" data-original="/original.png" src="/placeholder.gif">'
        images = _extract(make_document, html)
        assert images[0].resolved_url == "https://example.com/original.png"
        assert images[0].source_type == "img (lazy)"

    def test_css_background(self, make_document):
        html = "<div style=\"background-image: url('/bg.jpg')\"></div>"
        images = _extract(make_document, html)
        assert [(i.resolved_url, i.source_type) for i in images] == [("https://example.com/bg.jpg", "css background")]

    def test_data_bg_fallback(self, make_document):
        html = '<div draggable="true" data-background="/bg2.jpg"></div>'
        images = _extract(make_document, html)
        assert [(i.resolved_url, i.source_type) for i in images] == [("https://example.com/bg2.jpg", "data-bg")]

    def test_source_inherits_alt_from_picture_img(self, make_document):
        html = (
            "<picture>"
            '<source srcset="/hero-480.webp 480w, /hero-1200.webp 1200w">'
            '<img src="/hero.jpg" alt="Hero" title="Hero title">'
            "</picture>"
        )
        images = _extract(make_document, html)
        assert [i.resolved_url for i in images] == [
            "https://example.com/hero-1200.webp",
            "https://example.com/hero.jpg",
        ]
        assert images[0].source_type == "source (srcset)"
        assert images[0].alt_text == "Hero"
        assert images[0].title == "Hero title"

    def test_unresolvable_url_dropped(self, make_document):
        html = '<img src="http://[broken/a.png"><img src="/ok.png">'
        images = _extract(make_document, html)
        assert [i.resolved_url for i in images] == ["https://example.com/ok.png"]

    def test_document_order(self, make_document):
        html = (
            '<div style="background-image:url(/1.png)"></div>'
            '<img src="/2.png">'
            "<svg></svg>"
            '<img data-lazy="/3.png">'
        )
        types = [i.source_type for i in _extract(make_document, html)]
        assert types == ["css background", "img", "svg (inline)", "img (lazy)"]

    def test_elements_without_source_are_skipped(self, make_document):
        assert _extract(make_document, '<img alt="empty"><source type="image/webp">') == []

    def test_element_kind_resolved_once_per_element(self, make_document):
        doc = make_document(
            '<div><img src="/a.png"><picture><source srcset="/b.webp 1x"><img src="/c.png"></picture><svg></svg></div>'
        )
        with patch.object(PageDocument, "element_kind", wraps=PageDocument.element_kind) as element_kind:
            images = ImageExtractor(doc).extract()
        assert [image.source_type for image in images] == ["img", "source (srcset)", "img", "svg (inline)"]
        assert element_kind.call_count == len(list(doc.iter_elements()))
