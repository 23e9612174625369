"""City epidemic figures looked up in a published area tree."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import requests

TX_URL = (
    "https://api.inews.qq.com/newsqa/v1/query/inner/publish/modules/list"
    "?modules=statisGradeCityDetail,diseaseh5Shelf"
)


def _int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass
class Area:
    """Figures for one area and its sub-areas."""

    name: str = ""
    today_confirm: int = 0
    today_wzz_add: Any = None
    now_confirm: int = 0
    confirm: int = 0
    dead: int = 0
    heal: int = 0
    grade: str = ""
    wzz: int = 0
    children: list[Area] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> Area:
        today = data.get("today") or {}
        total = data.get("total") or {}
        return cls(
            name=_str(data.get("name")),
            today_confirm=_int(today.get("confirm")),
            today_wzz_add=today.get("wzz_add"),
            now_confirm=_int(total.get("nowConfirm")),
            confirm=_int(total.get("confirm")),
            dead=_int(total.get("dead")),
            heal=_int(total.get("heal")),
            grade=_str(total.get("grade")),
            wzz=_int(total.get("wzz")),
            children=[cls.from_dict(c) for c in data.get("children") or [] if c is not None],
        )


def find_city(area: Area | None, name: str) -> Area | None:
    """Find an area by name, checking each level's children before descending."""
    if area is None:
        return None
    if area.name == name:
        return area
    for child in area.children:
        if child.name == name:
            return child
        found = find_city(child, name)
        if found is not None:
            return found
    return None


def parse_result(data, city: str) -> tuple[Area | None, str]:
    """Parse the service reply and return the city's area and the update time."""
    if isinstance(data, (bytes, str)):
        data = json.loads(data)
    shelf = ((data or {}).get("data") or {}).get("diseaseh5Shelf") or {}
    tree = shelf.get("areaTree") or []
    if not tree:
        raise ValueError("epidemic data has an empty area tree")
    root = Area.from_dict(tree[0]) if tree[0] is not None else None
    return find_city(root, city), _str(shelf.get("lastUpdateTime"))


def query_epidemic(city: str, session=None) -> tuple[Area | None, str]:
    """Fetch the latest figures and return the city's area and the update time."""
    http = session if session is not None else requests.Session()
    resp = http.get(TX_URL)
    resp.raise_for_status()
    return parse_result(resp.content, city)


def _fmt(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_report(area: Area, update_time: str) -> str:
    """Render a city's figures as the chat reply."""
    return (
        "【" + area.name + "】疫情数据\n"
        + "新增人数：" + str(area.today_confirm) + "\n"
        + "现有确诊：" + str(area.now_confirm) + "\n"
        + "累计确诊：" + str(area.confirm) + "\n"
        + "治愈人数：" + str(area.heal) + "\n"
        + "死亡人数：" + str(area.dead) + "\n"
        + "无症状人数：" + str(area.wzz) + "\n"
        + "新增无症状：" + _fmt(area.today_wzz_add) + "\n"
        + "更新时间：\n『" + update_time + "』"
    )