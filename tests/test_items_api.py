import json

PASSWORD = "Secret123"

TSV = (
    "Item Number\tItem Name\tDescription\tSelling Price\n"
    "B200\tgadget\tLarge gadget\t$7.25\n"
    "A100\tWidget\tSmall widget\t$5.00\n"
)


def upload(client, content, filename="items.txt", mimetype="text/plain"):
    return client.post("/api/items/upload", files={"file": (filename, content, mimetype)})


def test_upload_and_read_back(admin_client):
    response = upload(admin_client, TSV.encode("utf-8"))
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["ok"] is True
    assert body["parsed_rows"] == 2
    assert body["upserted"] == 2
    assert body["saw_headers"][0] == "Item Number"
    assert body["snapshot"]["saved"] is True

    items = admin_client.get("/api/items").json()
    assert [i["Item Number"] for i in items] == ["B200", "A100"]
    assert items[1]["Selling Price"] == "$5.00"
    assert items[1]["Buy"] == ""

    assert admin_client.get("/api/items/_count").json() == {"count": 2}
    assert len(admin_client.get("/api/items/_sample").json()) == 2

    compact = admin_client.get("/api/items/compact").json()
    assert compact[0] == {
        "item_number": "B200",
        "product_name": "gadget",
        "description": "Large gadget",
        "price": "$7.25",
    }


def test_upload_without_file(admin_client):
    response = admin_client.post("/api/items/upload")
    assert response.status_code == 400
    assert response.json()["detail"] == "No file uploaded"


def test_upload_header_only_file(admin_client):
    response = upload(admin_client, b"Item Number,Item Name\n", "empty.csv", "text/csv")
    assert response.status_code == 400
    body = response.json()
    assert body["ok"] is False
    assert body["error"] == "No rows parsed from file"
    assert body["first_line"] == "Item Number,Item Name"


def test_upload_binary_file(admin_client):
    response = upload(admin_client, b"PK\x03\x04\x00\x00\x00\x00", "book.xlsx", "application/octet-stream")
    assert response.status_code == 400
    assert response.json()["ok"] is False
    assert admin_client.get("/api/items/_count").json()["count"] == 0


def test_upload_requires_sign_in(client):
    assert upload(client, TSV.encode("utf-8")).status_code == 401


def test_upload_requires_admin(client, make_customer, login):
    make_customer("shopper@shipshape.com.au")
    login("shopper@shipshape.com.au", PASSWORD)
    response = upload(client, TSV.encode("utf-8"))
    assert response.status_code == 403
    assert response.json()["detail"] == "Admin only."


def test_import_rules_round_trip(admin_client, data_dir):
    assert admin_client.get("/api/items/rules").json() == {"itemNumberPrefixes": []}

    response = admin_client.put("/api/items/rules", json={"itemNumberPrefixes": [" x-", "X-", "", "ZZ"]})
    assert response.status_code == 200
    assert response.json() == {"itemNumberPrefixes": ["x-", "ZZ"]}
    saved = json.loads((data_dir / "import-rules.json").read_text(encoding="utf-8"))
    assert saved == {"itemNumberPrefixes": ["x-", "ZZ"]}

    body = upload(admin_client, b"Item Number,Item Name\nX-1,Skip\nA-1,Keep\n", "items.csv").json()
    assert body["upserted"] == 1
    assert body["skipped_by_rule"] == 1


def test_update_rules_requires_admin(client):
    assert client.put("/api/items/rules", json={"itemNumberPrefixes": ["X-"]}).status_code == 401


def test_patch_item(admin_client):
    upload(admin_client, TSV.encode("utf-8"))

    response = admin_client.patch("/api/items/A100", json={"Selling Price": " $6.00 ", "item_name": "Widget XL"})
    assert response.status_code == 200
    body = response.json()
    assert body["Selling Price"] == "$6.00"
    assert body["Item Name"] == "Widget XL"
    assert body["Description"] == "Small widget"


def test_patch_missing_item(admin_client):
    response = admin_client.patch("/api/items/NOPE", json={"Item Name": "x"})
    assert response.status_code == 404


def test_clear_and_upload_log(admin_client):
    upload(admin_client, TSV.encode("utf-8"))

    response = admin_client.post("/api/items/clear")
    assert response.json() == {"ok": True, "deleted": 2}
    assert admin_client.get("/api/items").json() == []

    log = admin_client.get("/api/items/uploads").json()
    assert [e["filename"] for e in log] == ["CLEAR", "items.txt"]
    assert log[0]["parsed_rows"] == -2
    assert log[1]["parsed_rows"] == 2


def test_public_price_list_signed_out(admin_client, client):
    upload(admin_client, TSV.encode("utf-8"))
    client.cookies.clear()

    body = client.get("/api/items/price-list").json()
    assert body["business_discount_applied"] is False
    row = next(r for r in body["items"] if r["item_number"] == "A100")
    assert row["price"] == "$5.00"
    assert row["price_cents"] == 500
    assert row["special_price_cents"] is None
