"""Daily fortune slips drawn onto a background picked from an image archive."""

from __future__ import annotations

import hashlib
import io
import os
import random
import zipfile as _zip
from datetime import date

from PIL import Image, ImageDraw, ImageFont

IMAGES = "data/Fortune/"
OMIKUJI_JSON = "data/Fortune/text.json"
FONT = "data/Font/sakura.ttf"
CACHE = IMAGES + "cache/"

DEFAULT_BACKGROUND = "车万"

TABLE: tuple[str, ...] = (
    "车万", "DC4", "爱因斯坦", "星空列车", "樱云之恋", "富婆妹", "李清歌", "公主连结",
    "原神", "明日方舟", "碧蓝航线", "碧蓝幻想", "战双", "阴阳师", "赛马娘", "东方归言录",
    "奇异恩典", "夏日口袋", "ASoul",
)

_INDEX = {name: i for i, name in enumerate(TABLE)}

_COLUMN = 9


def background_index(name: str) -> int:
    """Return the stored index of a background kind."""
    try:
        return _INDEX[name]
    except KeyError:
        raise ValueError("没有这个底图哦～") from None


def background_for(value: int) -> str:
    """Return the background kind for a stored setting, falling back to the default."""
    v = value & 0xFF
    return TABLE[v] if v < len(TABLE) else DEFAULT_BACKGROUND


def offset(total: int, now: int, distance: float) -> float:
    """Offset of the now-th of total evenly spaced items around the centre."""
    if total % 2 == 0:
        return (float(now - total // 2) - 1) * distance
    return (float(now - total // 2) - 1.5) * distance


def rows_num(total: int, div: int) -> int:
    """Number of groups of div needed to hold total items."""
    rows, rest = divmod(total, div)
    return rows + 1 if rest else rows


def glyph_positions(text: str, width: float, height: float) -> list[tuple[str, float, float]]:
    """Lay a slip's text out in vertical columns; return (char, x, y) per character."""
    chars = list(text)
    n = len(chars)
    xsum = rows_num(n, _COLUMN)
    positions: list[tuple[str, float, float]] = []
    if xsum == 2:
        div = rows_num(n, 2)
        for i, ch in enumerate(chars):
            xnow = rows_num(i + 1, div)
            ysum = min(n - (xnow - 1) * div, div)
            ynow = i % div + 1
            x = -offset(xsum, xnow, width) + 115
            if xnow == 1:
                y = offset(_COLUMN, ynow, height) + 320.0
            else:
                y = offset(_COLUMN, ynow + (_COLUMN - ysum), height) + 320.0
            positions.append((ch, x, y))
        return positions
    for i, ch in enumerate(chars):
        xnow = rows_num(i + 1, _COLUMN)
        ysum = min(n - (xnow - 1) * _COLUMN, _COLUMN)
        ynow = i % _COLUMN + 1
        positions.append(
            (ch, -offset(xsum, xnow, width) + 115, offset(ysum, ynow, height) + 320.0)
        )
    return positions


def cache_name(zipfile: str, index: int, title: str, text: str) -> str:
    """Name of the cached picture for a background and slip."""
    digest = hashlib.md5((zipfile + str(index) + title + text).encode("utf-8"))
    return digest.hexdigest()


def pick_index(user_id: int, count: int, day: date | None = None) -> int:
    """Pick an index below count that stays the same for a user all day."""
    if count <= 0:
        raise ValueError("nothing to pick from")
    day = day or date.today()
    return random.Random(f"{user_id}:{day.isoformat()}").randrange(count)


def random_image(path, user_id: int, day: date | None = None) -> tuple[Image.Image, int]:
    """Open the user's background of the day from a zip archive; return it and its index."""
    with _zip.ZipFile(path) as archive:
        entries = archive.infolist()
        index = pick_index(user_id, len(entries), day)
        data = archive.read(entries[index])
    image = Image.open(io.BytesIO(data))
    image.load()
    return image, index


def draw(background: Image.Image, title: str, text: str, font_path, out) -> int:
    """Draw a fortune slip over the background, write it as PNG; return bytes written."""
    title_font = ImageFont.truetype(os.fspath(font_path), 45)
    body_font = ImageFont.truetype(os.fspath(font_path), 23)

    bw, bh = background.size
    canvas = Image.new("RGBA", (bh, bw), (0, 0, 0, 0))
    canvas.paste(background.convert("RGBA"), (0, 0))
    pen = ImageDraw.Draw(canvas)

    sw = title_font.getlength(title)
    pen.text((140 - sw / 2, 112), title, fill=(255, 255, 255, 255), font=title_font, anchor="ls")

    tw = body_font.getlength("测") + 10
    th = 23 * 72 / 96 + 10
    for ch, x, y in glyph_positions(text, tw, th):
        pen.text((x, y), ch, fill=(0, 0, 0, 255), font=body_font, anchor="ls")

    buf = io.BytesIO()
    canvas.save(buf, format="PNG")
    data = buf.getvalue()
    if isinstance(out, (str, os.PathLike)):
        with open(out, "wb") as f:
            f.write(data)
    else:
        out.write(data)
    return len(data)