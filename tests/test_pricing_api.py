import json

import pytest


@pytest.fixture
def pricing_files(data_dir):
    overrides = data_dir / "customer-overrides"
    overrides.mkdir()
    (overrides / "MGIS.json").write_text(json.dumps({
        "customerName": "MGIS",
        "rules": [
            {"sku": "A100", "fixedPriceCents": 450},
            {"sku": "b200", "discountPct": 0.1},
        ],
    }))
    (data_dir / "customer-discounts.json").write_text(json.dumps({"MGIS": 0.2, "DEFAULT": 0.05}))
    return data_dir


def resolve(client, **params):
    return client.get("/api/prices/resolve", params=params)


@pytest.mark.parametrize("sku, expected_cents, expected_type, expected_value", [
    ("A100", 450, "fixed", 450),
    ("B200", 900, "rule", 0.1),
    ("C300", 800, "default", 0.2),
])
def test_resolve_precedence(client, pricing_files, sku, expected_cents, expected_type, expected_value):
    response = resolve(client, customerId="MGIS", sku=sku, basePriceCents=1000)
    assert response.status_code == 200
    body = response.json()
    assert body["customer_id"] == "MGIS"
    assert body["base_price_cents"] == 1000
    assert body["customer_price_cents"] == expected_cents
    assert body["applied"] == {"type": expected_type, "value": expected_value}


def test_resolve_other_customer_uses_global_default(client, pricing_files):
    body = resolve(client, customerId="ACME", sku="A100", basePriceCents=1000).json()
    assert body["customer_price_cents"] == 950
    assert body["applied"]["type"] == "default"


def test_resolve_without_any_files(client):
    body = resolve(client, customerId="MGIS", sku="A100", basePriceCents=1234).json()
    assert body["customer_price_cents"] == 1234
    assert body["applied"]["type"] == "none"


def test_resolve_validates_query(client):
    assert resolve(client, customerId="MGIS", sku="A100").status_code == 422
    assert resolve(client, customerId="MGIS", sku="A100", basePriceCents=-1).status_code == 422


def test_customer_price_list(admin_client, pricing_files):
    admin_client.post("/api/items/upload", files={"file": (
        "prices.txt",
        b"Item Number\tItem Name\tSelling Price\nA100\tWidget\t$10.00\nB200\tGadget\t20\nC300\tBolt\tPOA\n",
        "text/plain",
    )})

    body = admin_client.get("/api/prices", params={"customerId": "MGIS"}).json()
    assert body["customer_id"] == "MGIS"
    assert body["count"] == 2
    prices = {p["sku"]: p for p in body["prices"]}
    assert prices["A100"]["customer_price_cents"] == 450
    assert prices["B200"]["list_price_cents"] == 2000
    assert prices["B200"]["customer_price_cents"] == 1800
    assert "C300" not in prices
