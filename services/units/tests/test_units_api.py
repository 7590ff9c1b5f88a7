"""
Tests for the /api/units endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from creamery_units.main import app

client = TestClient(app)


def test_ready():
    response = client.get("/api/ready")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "categories": 4}


# --- Catalogue ---

def test_list_categories():
    response = client.get("/api/units/categories")
    assert response.status_code == 200
    categories = response.json()["categories"]
    assert [c["type"] for c in categories] == [
        "weight", "dairy_liquid", "packaging", "count",
    ]
    liquid = categories[1]
    assert liquid["name"] == "Dairy & Liquid Ingredients"
    assert liquid["base_unit"] == "ml"
    assert {"symbol": "l", "name": "Liters", "factor": 1000.0} in liquid["units"]


def test_get_category():
    response = client.get("/api/units/categories/weight")
    assert response.status_code == 200
    data = response.json()
    assert data["base_unit"] == "g"
    assert [u["symbol"] for u in data["units"]] == [
        "g", "mg", "kg", "oz", "lb", "cup_dry", "tbsp_dry", "tsp_dry",
    ]


def test_get_unknown_category_404():
    response = client.get("/api/units/categories/nebula")
    assert response.status_code == 404
    assert "nebula" in response.json()["detail"]


def test_list_units():
    response = client.get("/api/units/categories/packaging/units")
    assert response.status_code == 200
    assert [u["symbol"] for u in response.json()] == ["unit", "dz", "box", "case"]


def test_list_units_unknown_category_is_empty():
    response = client.get("/api/units/categories/nebula/units")
    assert response.status_code == 200
    assert response.json() == []


def test_convertible_units():
    response = client.get("/api/units/convertible/cup")
    assert response.status_code == 200
    symbols = [u["symbol"] for u in response.json()]
    assert "l" in symbols
    assert "g" not in symbols

    response = client.get("/api/units/convertible/parsec")
    assert response.json() == []


# --- Conversion ---

def test_convert_kg_to_g():
    # 2 kg = 2000 g
    response = client.post("/api/units/convert", json={
        "qty": 2,
        "from_unit": "kg",
        "to_unit": "g"
    })
    assert response.status_code == 200
    data = response.json()
    assert data["qty"] == 2000
    assert data["unit"] == "g"
    assert data["from_unit"] == "kg"
    assert data["display"] == 2000


def test_convert_cup_to_liters_display():
    # 1 cup = 0.236588 l, shown as 0.237
    response = client.post("/api/units/convert", json={
        "qty": 1,
        "from_unit": "cup",
        "to_unit": "l"
    })
    assert response.status_code == 200
    data = response.json()
    assert data["qty"] == pytest.approx(0.236588)
    assert data["display"] == 0.237


def test_convert_grams_to_pounds():
    # 500 g = 1.10231 lb
    response = client.post("/api/units/convert", json={
        "qty": 500,
        "from_unit": "g",
        "to_unit": "lb"
    })
    assert response.status_code == 200
    data = response.json()
    assert data["unit"] == "lb"
    assert data["from_unit"] == "g"
    assert data["display"] == 1.102


def test_convert_dry_tablespoons_to_grams():
    # 4 tbsp of cocoa powder ~ 60 g
    response = client.post("/api/units/convert", json={
        "qty": 4,
        "from_unit": "tbsp_dry",
        "to_unit": "g"
    })
    assert response.status_code == 200
    assert response.json() == {"qty": 60, "unit": "g", "from_unit": "tbsp_dry", "display": 60}


def test_convert_custom_decimals():
    response = client.post("/api/units/convert", json={
        "qty": 1,
        "from_unit": "cup",
        "to_unit": "l",
        "decimals": 1
    })
    assert response.status_code == 200
    assert response.json()["display"] == 0.2


def test_convert_incompatible():
    response = client.post("/api/units/convert", json={
        "qty": 5,
        "from_unit": "g",
        "to_unit": "l"
    })
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["kind"] == "units_incompatible"
    assert detail["from_category"] == "weight"
    assert detail["to_category"] == "dairy_liquid"
    assert "'g'" in detail["message"]


def test_convert_unknown_unit():
    response = client.post("/api/units/convert", json={
        "qty": 10,
        "from_unit": "glarps",
        "to_unit": "g"
    })
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["kind"] == "unknown_unit"
    assert detail["symbol"] == "glarps"


def test_convert_identity_unknown_symbol():
    response = client.post("/api/units/convert", json={
        "qty": 4,
        "from_unit": "scoop",
        "to_unit": "scoop"
    })
    assert response.status_code == 200
    assert response.json()["qty"] == 4


def test_convert_non_finite():
    # JSON has no NaN literal, but Python's json module writes one
    response = client.post(
        "/api/units/convert",
        content='{"qty": NaN, "from_unit": "g", "to_unit": "kg"}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code in (400, 422)


def test_convert_identity_non_finite():
    response = client.post(
        "/api/units/convert",
        content='{"qty": Infinity, "from_unit": "g", "to_unit": "g"}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code in (400, 422)


def test_convert_missing_field():
    response = client.post("/api/units/convert", json={"qty": 1, "from_unit": "g"})
    assert response.status_code == 422


# --- Scaling ---

def test_scale_recipe():
    response = client.post("/api/units/scale", json={
        "factor": 2,
        "lines": [
            {"label": "Heavy cream", "qty": 1, "unit": "qt", "stock_unit": "l"},
            {"label": "Sugar cones", "qty": 6, "unit": "dz"}
        ]
    })
    assert response.status_code == 200
    data = response.json()
    assert data["factor"] == 2
    cream, cones = data["lines"]
    # 2 qt = 1892.706 ml = 1.892706 l
    assert cream["qty"] == pytest.approx(1.892706)
    assert cream["unit"] == "l"
    assert cones == {
        "label": "Sugar cones",
        "qty": 12,
        "unit": "dz",
        "source_qty": 12,
        "source_unit": "dz",
    }


def test_scale_recipe_names_failing_line():
    response = client.post("/api/units/scale", json={
        "factor": 1,
        "lines": [
            {"label": "Chocolate chips", "qty": 2, "unit": "cup", "stock_unit": "kg"}
        ]
    })
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["kind"] == "units_incompatible"
    assert detail["label"] == "Chocolate chips"
    assert detail["message"].startswith("Chocolate chips: ")


def test_scale_recipe_rejects_zero_factor():
    response = client.post("/api/units/scale", json={"factor": 0, "lines": []})
    assert response.status_code == 422


# --- Catalogue override ---

def test_custom_registry_override(client_with_registry, make_registry):
    registry = make_registry([
        {"type": "count", "name": "Count", "units": [
            {"symbol": "each", "name": "Each", "factor": 1},
            {"symbol": "gross", "name": "Gross", "factor": 144},
        ]},
    ])
    custom = client_with_registry(registry)

    response = custom.get("/api/units/categories")
    assert [c["type"] for c in response.json()["categories"]] == ["count"]

    response = custom.post("/api/units/convert", json={
        "qty": 2,
        "from_unit": "gross",
        "to_unit": "each"
    })
    assert response.status_code == 200
    assert response.json()["qty"] == 288

    response = custom.post("/api/units/convert", json={
        "qty": 1,
        "from_unit": "kg",
        "to_unit": "g"
    })
    assert response.status_code == 400
    assert response.json()["detail"]["kind"] == "unknown_unit"
