import json

import pytest
import requests
import responses

from zbkit import hs

PAGE = '<script>var hash = "abc123"; var x = 1;</script>'
CODE = "AAE" + "B" * 72


def test_extract_hash():
    assert hs.extract_hash(PAGE) == "abc123"


def test_extract_hash_missing():
    with pytest.raises(ValueError):
        hs.extract_hash("<html></html>")


def test_search_url():
    url = hs.search_url("h", "火球")
    assert url.startswith(hs.HS + hs.PARA)
    assert url.endswith("&hash=h&search=火球")


def test_deck_url():
    url = hs.deck_url("h", CODE)
    assert "mod=general_deck_image&deck_code=" + CODE + "&deck_text=&hash=h" in url
    assert url.endswith("&search=" + CODE)


def test_match_deck_code():
    assert hs.match_deck_code("卡组\n" + CODE + " 好玩") == CODE
    assert hs.match_deck_code("AAE" + "B" * 10) is None


def test_card_entries_limit():
    payload = json.dumps({"list": [{"CardID": f"C{i}", "auth_key": "k"} for i in range(8)]})
    entries = hs.card_entries(payload, 5)
    assert [e[0] for e in entries] == ["C0", "C1", "C2", "C3", "C4"]
    assert entries[0][1] == hs.CARD_IMAGE_BASE + "C0.png?auth_key=k"


def test_card_entries_empty():
    assert hs.card_entries("", 5) == []
    assert hs.card_entries({"list": []}) == []


def test_search_cards():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(responses.GET, hs.SITE, body=PAGE)
        body = json.dumps({"list": [{"CardID": "X1", "auth_key": "k"}]})
        rsps.add(responses.GET, hs.search_url("abc123", "q"), body=body)
        result = hs.search_cards("q")
        assert [e[0] for e in hs.card_entries(result)] == ["X1"]
        assert rsps.calls[0].request.headers["Referer"] == hs.SITE


def test_deck_image():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(responses.GET, hs.SITE, body=PAGE)
        rsps.add(responses.GET, hs.deck_url("abc123", CODE), json={"img": "QUJD"})
        assert hs.deck_image(CODE) == "base64://QUJD"


def test_search_cards_http_error():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(responses.GET, hs.SITE, status=500)
        with pytest.raises(requests.HTTPError):
            hs.search_cards("q")