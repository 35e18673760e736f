from buildtrack.core.widget_catalog import (
    WIDGET_CATALOG,
    WidgetSize,
    WidgetType,
    build_default_dashboard,
    get_catalog,
    get_definition,
    grid_width,
    layout_item,
)

def test_catalog_entries_are_well_formed():
    ids = [w["id"] for w in WIDGET_CATALOG]
    assert len(ids) == len(set(ids))
    for widget in WIDGET_CATALOG:
        assert WidgetType(widget["type"])
        assert WidgetSize(widget["size"])
        assert widget["isVisible"] is True
        assert widget["settings"] == {}

def test_get_catalog_returns_copy():
    catalog = get_catalog()
    catalog[0]["settings"]["mutated"] = True
    assert WIDGET_CATALOG[0]["settings"] == {}

def test_get_definition():
    assert get_definition(WidgetType.MY_TASKS)["id"] == "my-tasks"
    assert get_definition("CRITICAL_PATH")["size"] == "small"
    assert get_definition("ANALYTICS") is None

def test_grid_width():
    assert grid_width(WidgetSize.SMALL) == 3
    assert grid_width("medium") == 6
    assert grid_width("large") == 12
    assert grid_width("extra_large") == 12
    assert grid_width(None) == 6

def test_layout_item():
    assert layout_item({"id": "w", "size": "large"}, 0, 4) == {
        "i": "w", "x": 0, "y": 4, "w": 12, "h": 4, "minW": 3, "minH": 2,
    }

def test_default_dashboard():
    dashboard = build_default_dashboard()
    assert dashboard["id"] == "default"
    assert dashboard["isDefault"] is True
    assert [w["id"] for w in dashboard["widgets"]] == [w["id"] for w in WIDGET_CATALOG[:4]]
    positions = [(i["x"], i["y"]) for i in dashboard["layouts"]["desktop"]]
    assert positions == [(0, 0), (6, 0), (0, 4), (6, 4)]
    assert dashboard["layouts"]["tablet"] == []
    assert dashboard["layouts"]["mobile"] == []
