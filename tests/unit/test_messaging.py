"""
Unit tests for the host request contracts.
"""

import pytest

from seolens.exceptions import InvalidRequestError
from seolens.messaging import ToggleHighlightRequest, handle_message, parse_request

HTML = """
<html><head><title>Contact</title></head><body>
<a href="/team">Team</a>
<a href="https://partner.example.net/" rel="nofollow">Partner</a>
<a href="mailto:hello@example.com">Mail</a>
</body></html>
"""


@pytest.fixture
def document(make_document):
    return make_document(HTML, url="https://example.com/contact")


class TestHandleMessage:
    def test_get_data_returns_plain_snapshot(self, document):
        response = handle_message({"action": "getSEOData"}, document)
        assert response["title"] == "Contact"
        assert response["emails"] == ["hello@example.com"]
        assert [link["absolute_href"] for link in response["links"]["internal"]] == ["https://example.com/team"]

    def test_toggle_highlight(self, document):
        assert handle_message({"action": "toggleHighlight", "linkType": "mailto", "enabled": True}, document) is None
        assert document.find("a", href="mailto:hello@example.com").get("class") == ["seo-highlight-mailto"]

        handle_message({"action": "toggleHighlight", "linkType": "mailto", "enabled": False}, document)
        assert not document.find("a", href="mailto:hello@example.com").has_attr("class")

    def test_toggle_nofollow_defaults_to_enabled(self, document):
        handle_message({"action": "toggleNofollow"}, document)
        assert document.find("a", href="https://partner.example.net/").get("class") == ["seo-highlight-nofollow"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"action": "explode"},
            {"action": "toggleHighlight", "linkType": "sponsored", "enabled": True},
            {"action": "toggleHighlight", "linkType": "internal"},
            {},
        ],
    )
    def test_invalid_requests(self, document, payload):
        with pytest.raises(InvalidRequestError):
            handle_message(payload, document)

    def test_non_mapping_request(self, document):
        with pytest.raises(InvalidRequestError):
            handle_message(["getSEOData"], document)  # type: ignore[arg-type]

    def test_invalid_request_is_value_error(self):
        with pytest.raises(ValueError):
            parse_request({"action": "nope"})

    def test_parse_request_accepts_field_name(self):
        request = parse_request({"action": "toggleHighlight", "link_type": "tel", "enabled": False})
        assert isinstance(request, ToggleHighlightRequest)
        assert request.link_type.value == "tel"
