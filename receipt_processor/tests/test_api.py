# tests/test_api.py
import uuid

def test_health(client):
    assert client.get("/health").json() == {"ok": True}

def test_process_and_points(client, receipt_json):
    r = client.post("/receipts/process", json=receipt_json("simple-receipt.json"))
    assert r.status_code == 200
    receipt_id = r.json()["id"]
    uuid.UUID(receipt_id)

    r = client.get(f"/receipts/{receipt_id}/points")
    assert r.status_code == 200
    assert r.json() == {"points": "31"}

def test_points_with_trailing_slash(client, receipt_json):
    receipt_id = client.post("/receipts/process", json=receipt_json("mm-corner-market-receipt.json")).json()["id"]
    r = client.get(f"/receipts/{receipt_id}/points/")
    assert r.status_code == 200
    assert r.json() == {"points": "109"}

def test_unknown_receipt_is_404(client):
    r = client.get(f"/receipts/{uuid.uuid4()}/points")
    assert r.status_code == 404
    assert r.json()["detail"] == "No receipt found for that ID."

def test_zero_point_receipt_is_not_404(client):
    body = {"retailer": "", "purchaseDate": "2022-01-02", "purchaseTime": "09:00",
            "items": [], "total": "0.10"}
    receipt_id = client.post("/receipts/process", json=body).json()["id"]
    r = client.get(f"/receipts/{receipt_id}/points")
    assert r.status_code == 200
    assert r.json() == {"points": "0"}

def test_malformed_json_is_400(client, service):
    r = client.post("/receipts/process", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["detail"] == "The receipt is invalid."
    assert len(service.store) == 0

def test_missing_and_null_fields_score_as_empty(client, receipt_json):
    body = receipt_json("simple-receipt.json")
    del body["purchaseTime"]
    body["total"] = None
    body["items"].append(None)
    r = client.post("/receipts/process", json=body)
    assert r.status_code == 200
    receipt_id = r.json()["id"]
    # retailer 6 + one pair of items 5; the null item has an empty, unparsable price
    assert client.get(f"/receipts/{receipt_id}/points").json() == {"points": "11"}
    evidence = client.get(f"/receipts/{receipt_id}/evidence").json()
    assert set(evidence["skipped"]) == {"round_total", "purchase_time_window", "item_description"}

def test_null_items_is_empty_list(client):
    r = client.post("/receipts/process", json={"retailer": "abc", "items": None})
    assert r.status_code == 200
    assert client.get(f"/receipts/{r.json()['id']}/points").json() == {"points": "3"}

def test_wrong_item_type_is_400(client, receipt_json, service):
    body = receipt_json("simple-receipt.json")
    body["items"] = [{"shortDescription": "abc", "price": 10}]
    assert client.post("/receipts/process", json=body).status_code == 400
    assert len(service.store) == 0

def test_numeric_total_is_400(client, receipt_json):
    body = receipt_json("simple-receipt.json")
    body["total"] = 1.25
    assert client.post("/receipts/process", json=body).status_code == 400

def test_unparsable_subfields_still_accepted(client, receipt_json):
    body = receipt_json("simple-receipt.json")
    body["purchaseDate"] = "not-a-date"
    body["total"] = "one twenty five"
    r = client.post("/receipts/process", json=body)
    assert r.status_code == 200
    receipt_id = r.json()["id"]
    # only the retailer rule survives
    assert client.get(f"/receipts/{receipt_id}/points").json() == {"points": "6"}

    evidence = client.get(f"/receipts/{receipt_id}/evidence").json()
    assert set(evidence["skipped"]) == {"round_total", "odd_purchase_day"}
    assert evidence["rules"]["retailer_name"] == 6

def test_evidence_unknown_is_404(client):
    assert client.get("/receipts/nope/evidence").status_code == 404

def test_huge_amounts_do_not_break_ingest_or_lookup(client, receipt_json):
    body = receipt_json("simple-receipt.json")
    body["total"] = "1e999999999"
    body["items"].append({"shortDescription": "abc", "price": "1e5000"})
    r = client.post("/receipts/process", json=body)
    assert r.status_code == 200
    receipt_id = r.json()["id"]
    # retailer 6 + one pair of items 5
    assert client.get(f"/receipts/{receipt_id}/points").json() == {"points": "11"}
    skipped = client.get(f"/receipts/{receipt_id}/evidence").json()["skipped"]
    assert set(skipped) == {"round_total", "item_description"}

def test_openapi_lists_receipt_routes(client):
    paths = client.get("/openapi.json").json()["paths"]
    assert "/receipts/process" in paths
    assert "/receipts/{receipt_id}/points" in paths
    assert "/receipts/{receipt_id}/points/" not in paths
