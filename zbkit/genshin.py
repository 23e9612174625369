"""Ten-pull wishes drawn from an image archive and rendered as one picture."""

from __future__ import annotations

import io
import random
import re
import zipfile
from dataclasses import dataclass, field

from PIL import Image

FIVE_BG = "five_bg.jpg"
FOUR_BG = "four_bg.jpg"
THREE_BG = "three_bg.jpg"
BACKGROUND = "bg0.jpg"
SHARE_ICON = "Reply.png"

CANVAS_SIZE = (1920, 1080)
CANVAS_COLOR = (50, 50, 50, 255)
FIRST_CARD_X = 230
CARD_STEP = 146
SHARE_OFFSET = (1270, 945)

_NAME_RE = re.compile(r"_(.*)\.png")
_PREFIX_LEN = len("Genshin/")
_MODE_BIT = 1


def is_five_star_mode(value: int) -> bool:
    """Whether a stored setting selects the five-star pool."""
    return value & _MODE_BIT == 1


def set_mode(value: int, five_stars: bool) -> int:
    """Return the stored setting with the five-star pool switched on or off."""
    if five_stars:
        return value | _MODE_BIT
    return value & ~_MODE_BIT


def item_name(path: str) -> str:
    """Name of a character or weapon taken from its image path."""
    m = _NAME_RE.search(path)
    if m is None:
        raise ValueError(f"no item name in {path!r}")
    return m.group(1)


def reply_text(names, kind: int, existing: str) -> str:
    """Announce five-star pulls: kind 1 for characters, 2 for weapons."""
    if kind == 1:
        header = "★五星角色★\n"
    elif kind == 2 and existing:
        header = "\n★五星武器★\n"
    else:
        header = "★五星武器★\n"
    return header + "".join(item_name(n) + " * " for n in names)


def _icon_key(path: str) -> str:
    start = path.rfind("/") + 1
    end = path.find("_")
    if end < start:
        raise ValueError(f"no element in {path!r}")
    return path[start:end] + ".png"


class GachaArchive:
    """Wish images indexed from a zip archive by folder and file name."""

    def __init__(self, archive: zipfile.ZipFile) -> None:
        self._zip = archive
        self._infos: dict[str, zipfile.ZipInfo] = {}
        self.tree: dict[str, list[str]] = {}
        self.star3: str | None = None
        self.star4: str | None = None
        self.star5: str | None = None
        for info in archive.infolist():
            if info.is_dir():
                self.tree[info.filename] = []
                continue
            name = info.filename[_PREFIX_LEN:]
            self._infos[name] = info
            slash = name.rfind("/")
            if slash < 0:
                self.tree[name] = [name]
                continue
            folder = name[:slash]
            if not folder:
                continue
            self.tree.setdefault(folder, []).append(name)
            if folder == "gacha":
                base = name[slash + 1:]
                if base == "ThreeStar.png":
                    self.star3 = name
                elif base == "FourStar.png":
                    self.star4 = name
                elif base == "FiveStar.png":
                    self.star5 = name

    def first(self, name: str) -> str:
        """Entry name of the first file filed under a key."""
        entries = self.tree.get(name)
        if not entries:
            raise KeyError(name)
        return entries[0]

    def read(self, name: str) -> bytes:
        """Contents of the file filed under a key."""
        return self.read_entry(self.first(name))

    def read_entry(self, entry: str) -> bytes:
        """Contents of an entry by its name inside the archive."""
        try:
            info = self._infos[entry]
        except KeyError:
            raise KeyError(entry) from None
        return self._zip.read(info)

    def folder(self, name: str) -> list[str]:
        """Entry names filed in a folder."""
        return list(self.tree.get(name, []))

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> GachaArchive:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def load_archive(path) -> GachaArchive:
    """Open and index a wish image archive."""
    return GachaArchive(zipfile.ZipFile(path))


@dataclass
class DrawResult:
    """What a pull produced, in display order."""

    five_characters: list[str] = field(default_factory=list)
    four_characters: list[str] = field(default_factory=list)
    five_weapons: list[str] = field(default_factory=list)
    four_weapons: list[str] = field(default_factory=list)
    three_weapons: list[str] = field(default_factory=list)
    # (background, item, star icon, element icon) entry names per card
    cards: list[tuple[str, str, str, str]] = field(default_factory=list)
    text: str = ""
    reply_mode: bool = False

    @property
    def message(self) -> str:
        """Text sent along with the picture."""
        if self.reply_mode:
            return "恭喜你抽到了: \n" + self.text
        return "十连成功~"


class Gacha:
    """Draws pulls from an archive; every ninth pull in the normal pool holds a five-star."""

    def __init__(self, archive: GachaArchive, rng: random.Random | None = None, total: int = 0) -> None:
        self.archive = archive
        self.rng = rng if rng is not None else random.Random()
        self.total = total

    def _pick(self, folder: str) -> str:
        items = self.archive.tree.get(folder)
        if not items:
            raise LookupError(f"folder {folder!r} is empty")
        return self.rng.choice(items)

    def _star(self, entry: str | None, label: str) -> str:
        if entry is None:
            raise LookupError(f"missing {label} star icon")
        return entry

    def draw(self, nums: int = 10, five_star_mode: bool = False) -> DrawResult:
        """Draw nums items and return them grouped and ordered for display."""
        a = self.archive
        five_bg, four_bg, three_bg = a.first(FIVE_BG), a.first(FOUR_BG), a.first(THREE_BG)
        r = DrawResult()

        def five() -> None:
            if self.rng.randrange(2) == 0:
                r.five_characters.append(self._pick("five"))
            else:
                r.five_weapons.append(self._pick("five2"))

        if self.total % 9 == 0:
            five()
            nums -= 1

        if five_star_mode:
            for _ in range(nums):
                five()
        else:
            for _ in range(nums):
                roll = self.rng.randrange(1000)
                if roll <= 800:
                    r.three_weapons.append(self._pick("Three"))
                elif roll <= 885:
                    r.four_characters.append(self._pick("four"))
                elif roll <= 970:
                    r.four_weapons.append(self._pick("four2"))
                elif roll <= 985:
                    r.five_characters.append(self._pick("five"))
                else:
                    r.five_weapons.append(self._pick("five2"))
            if not r.four_characters and not r.four_weapons and r.three_weapons:
                r.three_weapons.pop()
                if self.rng.randrange(2) == 0:
                    r.four_characters.append(self._pick("four"))
                else:
                    r.four_weapons.append(self._pick("four2"))
            self.total += 1

        def add(items: list[str], star: str, bg: str) -> None:
            for item in items:
                r.cards.append((bg, item, star, a.first(_icon_key(item))))

        if r.five_characters:
            add(r.five_characters, self._star(a.star5, "five"), five_bg)
            r.text += reply_text(r.five_characters, 1, r.text)
            r.reply_mode = True
        if r.four_characters:
            add(r.four_characters, self._star(a.star4, "four"), four_bg)
        if r.five_weapons:
            add(r.five_weapons, self._star(a.star5, "five"), five_bg)
            r.text += reply_text(r.five_weapons, 2, r.text)
            r.reply_mode = True
        if r.four_weapons:
            add(r.four_weapons, self._star(a.star4, "four"), four_bg)
        if r.three_weapons:
            add(r.three_weapons, self._star(a.star3, "three"), three_bg)
        return r

    def _image(self, entry: str) -> Image.Image:
        im = Image.open(io.BytesIO(self.archive.read_entry(entry)))
        im.load()
        return im.convert("RGBA")

    def render(self, result: DrawResult) -> Image.Image:
        """Compose the pull into one picture."""
        canvas = Image.new("RGBA", CANVAS_SIZE, CANVAS_COLOR)
        canvas.alpha_composite(self._image(self.archive.first(BACKGROUND)), (0, 0))
        for i, card in enumerate(result.cards):
            pos = (FIRST_CARD_X + CARD_STEP * i, 0)
            for entry in card:
                canvas.alpha_composite(self._image(entry), pos)
        canvas.alpha_composite(self._image(self.archive.first(SHARE_ICON)), SHARE_OFFSET)
        return canvas