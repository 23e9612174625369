"""Hearthstone card search and deck images from a card database site."""

from __future__ import annotations

import json
import re

import requests

SITE = "https://hs.fbigame.com"
USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 6.0; Nexus 5 Build/MRA58N) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/86.0.4240.198 Mobile Safari/537.36"
)
HS = "https://hs.fbigame.com/ajax.php?"
PARA = (
    "mod=get_cards_list&"
    "mode=-1&"
    "extend=-1&"
    "mutil_extend=&"
    "hero=-1&"
    "rarity=-1&"
    "cost=-1&"
    "mutil_cost=&"
    "techlevel=-1&"
    "type=-1&"
    "collectible=-1&"
    "isbacon=-1&"
    "page=1&"
    "search_type=1&"
    "deckmode=normal"
)
CARD_IMAGE_BASE = "https://res.fbigame.com/hs/v13/"

_DECK_RE = re.compile(r"^[\s\S]*?(AAE[a-zA-Z0-9/+=]{70,})[\s\S]*\Z")
_HASH_MARK = 'var hash = "'


def extract_hash(page: str) -> str:
    """Pull the request hash out of the site's front page."""
    _, sep, rest = page.partition(_HASH_MARK)
    if not sep:
        raise ValueError("page holds no request hash")
    return rest.split('"', 1)[0]


def search_url(page_hash: str, query: str) -> str:
    """URL of a card search."""
    return HS + PARA + "&hash=" + page_hash + "&search=" + query


def deck_url(page_hash: str, code: str) -> str:
    """URL of the deck image request for a deck code."""
    return (
        HS + PARA + "mod=general_deck_image&deck_code=" + code
        + "&deck_text=&hash=" + page_hash + "&search=" + code
    )


def match_deck_code(text: str) -> str | None:
    """Return the deck code embedded in a message, or None."""
    m = _DECK_RE.match(text)
    return m.group(1) if m else None


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value) if isinstance(value, (dict, list)) else str(value)


def card_entries(payload, limit: int = 5) -> list[tuple[str, str]]:
    """Return (card id, image URL) for the first cards of a search reply."""
    if isinstance(payload, (str, bytes)):
        payload = json.loads(payload) if payload else {}
    cards = payload.get("list") if isinstance(payload, dict) else None
    if not isinstance(cards, list):
        return []
    entries = []
    for card in cards[:limit]:
        card = card if isinstance(card, dict) else {}
        cid = _text(card.get("CardID"))
        entries.append(
            (cid, CARD_IMAGE_BASE + cid + ".png?auth_key=" + _text(card.get("auth_key")))
        )
    return entries


def _fetch(http, url: str) -> str:
    resp = http.get(url, headers={"Referer": SITE, "User-Agent": USER_AGENT})
    resp.raise_for_status()
    return resp.text


def search_cards(query: str, session=None) -> str:
    """Run a card search and return the raw reply."""
    http = session if session is not None else requests.Session()
    page_hash = extract_hash(_fetch(http, SITE))
    return _fetch(http, search_url(page_hash, query))


def deck_image(code: str, session=None) -> str:
    """Return the deck picture as a base64:// image reference."""
    http = session if session is not None else requests.Session()
    page_hash = extract_hash(_fetch(http, SITE))
    reply = json.loads(_fetch(http, deck_url(page_hash, code)) or "{}")
    image = reply.get("img") if isinstance(reply, dict) else None
    return "base64://" + _text(image)