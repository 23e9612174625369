import json

import pytest
import requests
import responses

from zbkit.epidemic import TX_URL, Area, find_city, format_report, parse_result, query_epidemic

TREE = {
    "name": "中国",
    "today": {"confirm": 10},
    "total": {"nowConfirm": 100},
    "children": [
        {
            "name": "广东",
            "today": {"confirm": 5},
            "total": {"confirm": 50},
            "children": [
                {
                    "name": "广州",
                    "today": {"confirm": 3, "wzz_add": 7},
                    "total": {"nowConfirm": 11, "confirm": 22, "dead": 1, "heal": 20, "wzz": 4},
                }
            ],
        },
        {"name": "北京", "today": {"confirm": 2}, "total": {}},
    ],
}

PAYLOAD = {"data": {"diseaseh5Shelf": {"lastUpdateTime": "2022-10-11 10:00:00", "areaTree": [TREE]}}}


def test_from_dict_defaults_and_values():
    area = Area.from_dict(TREE)
    city = area.children[0].children[0]
    assert city.name == "广州"
    assert city.heal == 20 and city.wzz == 4
    assert city.today_wzz_add == 7
    assert area.children[1].confirm == 0
    assert area.children[1].children == []


def test_find_city_root_child_and_grandchild():
    root = Area.from_dict(TREE)
    assert find_city(root, "中国") is root
    assert find_city(root, "北京").today_confirm == 2
    assert find_city(root, "广州").confirm == 22
    assert find_city(root, "上海") is None
    assert find_city(None, "广州") is None


def test_parse_result_from_text():
    area, when = parse_result(json.dumps(PAYLOAD), "广州")
    assert area.dead == 1
    assert when == "2022-10-11 10:00:00"


def test_parse_result_missing_city():
    area, when = parse_result(PAYLOAD, "nowhere")
    assert area is None
    assert when == "2022-10-11 10:00:00"


def test_parse_result_empty_tree_raises():
    with pytest.raises(ValueError):
        parse_result({"data": {"diseaseh5Shelf": {"areaTree": []}}}, "x")


def test_query_epidemic():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(responses.GET, TX_URL, json=PAYLOAD)
        area, when = query_epidemic("北京")
    assert area.name == "北京"
    assert when == "2022-10-11 10:00:00"


def test_query_epidemic_http_error():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(responses.GET, TX_URL, status=500)
        with pytest.raises(requests.HTTPError) as excinfo:
            query_epidemic("北京")
    assert "500" in str(excinfo.value)


def test_format_report_lines():
    area, when = parse_result(PAYLOAD, "广州")
    text = format_report(area, when)
    assert text.startswith("【广州】疫情数据\n")
    assert "新增人数：3\n" in text
    assert "治愈人数：20\n" in text
    assert "新增无症状：7\n" in text
    assert text.endswith("『" + when + "』")