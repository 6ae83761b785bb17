"""HTTP boundary: JSON contracts and error mapping."""

from __future__ import annotations

from dompet.extensions import session_scope
from dompet.models import Transaction


def _wallet(client, name: str, **extra) -> dict:
    response = client.post("/wallets", json={"name": name, **extra})
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def _category(client, name: str, category_type: str) -> dict:
    response = client.post("/categories", json={"name": name, "type": category_type})
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def _transfer(client, source: dict, destination: dict, amount: int = 500_000) -> dict:
    response = client.post(
        "/transactions",
        json={
            "type": "transfer",
            "from_wallet_id": source["id"],
            "to_wallet_id": destination["id"],
            "amount": amount,
            "occurred_at": "2024-01-10 14:00",
            "note": "Ambil tunai",
        },
    )
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_wallet_lifecycle(client):
    created = _wallet(client, "BCA")
    assert created["currency"] == "IDR"
    assert list(created) == ["id", "name", "currency", "createdAt"]

    renamed = client.patch(f"/wallets/{created['id']}", json={"name": "BCA Utama"})
    assert renamed.status_code == 200
    assert renamed.get_json()["name"] == "BCA Utama"

    listed = client.get("/wallets").get_json()
    assert [w["name"] for w in listed] == ["BCA Utama"]

    deleted = client.delete(f"/wallets/{created['id']}")
    assert deleted.status_code == 200
    assert deleted.get_json()["success"] is True

    missing = client.delete(f"/wallets/{created['id']}")
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "not_found"


def test_wallet_validation_errors(client):
    response = client.post("/wallets", json={"name": "", "currency": "RUPIAH"})

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "validation_error"
    assert set(body["errors"]) == {"name", "currency"}


def test_transfer_scenario_and_balances(client):
    source = _wallet(client, "A")
    destination = _wallet(client, "B")

    result = _transfer(client, source, destination)
    assert result["outgoing"]["walletId"] == source["id"]
    assert result["incoming"]["walletId"] == destination["id"]
    assert result["outgoing"]["id"] < result["incoming"]["id"]

    balances = client.get("/balances").get_json()
    assert [(row["walletName"], row["balance"]) for row in balances] == [("A", -500_000), ("B", 500_000)]

    single = client.get(f"/balances?wallet_id={destination['id']}").get_json()
    assert single == [
        {"walletId": destination["id"], "walletName": "B", "currency": "IDR", "balance": 500_000}
    ]

    legs = client.get(f"/transfer-groups/{result['transferGroupId']}").get_json()
    assert [leg["id"] for leg in legs] == [result["outgoing"]["id"], result["incoming"]["id"]]

    listing = client.get("/transactions?type=transfer&sort=oldest").get_json()
    assert {row["id"]: row["transferDirection"] for row in listing} == {
        result["outgoing"]["id"]: "out",
        result["incoming"]["id"]: "in",
    }


def test_balance_filter_errors(client):
    assert client.get("/balances?wallet_id=404").status_code == 404
    assert client.get("/balances?wallet_id=abc").status_code == 400
    assert client.get("/balances?wallet_id=99999999999999999999").status_code == 400


def test_transaction_create_update_delete(client):
    wallet = _wallet(client, "BCA")
    food = _category(client, "Makan & Minum", "expense")

    created = client.post(
        "/transactions",
        json={
            "type": "expense",
            "wallet_id": wallet["id"],
            "category_id": food["id"],
            "amount": 50_000,
            "occurred_at": "2024-01-20 12:30",
            "note": "Makan siang",
        },
    )
    assert created.status_code == 201
    row = created.get_json()
    assert row["occurredAt"] == "2024-01-20T12:30:00"
    assert row["categoryId"] == food["id"]

    fetched = client.get(f"/transactions/{row['id']}").get_json()
    assert fetched == row

    patched = client.patch(f"/transactions/{row['id']}", json={"amount": 75_000})
    assert patched.status_code == 200
    assert patched.get_json()["amount"] == 75_000
    assert patched.get_json()["note"] == "Makan siang"

    immutable = client.patch(f"/transactions/{row['id']}", json={"type": "income"})
    assert immutable.status_code == 400

    deleted = client.delete(f"/transactions/{row['id']}")
    assert deleted.get_json() == {"success": True, "deletedIds": [row["id"]]}
    assert client.get(f"/transactions/{row['id']}").status_code == 404


def test_transaction_input_errors(client):
    wallet = _wallet(client, "BCA")
    other = _wallet(client, "Cash")
    salary = _category(client, "Gaji", "income")
    base = {"type": "expense", "wallet_id": wallet["id"], "occurred_at": "2024-01-01 08:00"}

    for amount in ("100", True, 0, 1.5):
        response = client.post("/transactions", json={**base, "amount": amount})
        assert response.status_code == 400
        assert "amount" in response.get_json()["errors"]

    mismatch = client.post("/transactions", json={**base, "amount": 10, "category_id": salary["id"]})
    assert mismatch.status_code == 400

    unknown_wallet = client.post("/transactions", json={**base, "wallet_id": 999, "amount": 10})
    assert unknown_wallet.status_code == 404

    same_wallet = client.post(
        "/transactions",
        json={
            "type": "transfer",
            "from_wallet_id": other["id"],
            "to_wallet_id": other["id"],
            "amount": 10,
            "occurred_at": "2024-01-01 08:00",
        },
    )
    assert same_wallet.status_code == 400

    bad_date = client.post("/transactions", json={**base, "amount": 10, "occurred_at": "kemarin"})
    assert bad_date.status_code == 400


def test_patch_and_delete_transfer_through_leg(client):
    source = _wallet(client, "A")
    destination = _wallet(client, "B")
    result = _transfer(client, source, destination, 1_000)

    patched = client.patch(f"/transactions/{result['incoming']['id']}", json={"amount": 3_000})
    assert patched.status_code == 200
    body = patched.get_json()
    assert body["outgoing"]["amount"] == body["incoming"]["amount"] == 3_000

    rejected = client.patch(f"/transactions/{result['incoming']['id']}", json={"wallet_id": source["id"]})
    assert rejected.status_code == 400

    deleted = client.delete(f"/transactions/{result['outgoing']['id']}")
    assert sorted(deleted.get_json()["deletedIds"]) == [result["outgoing"]["id"], result["incoming"]["id"]]
    assert client.get(f"/transfer-groups/{result['transferGroupId']}").status_code == 404


def test_category_deletion_orphans_transactions(client):
    wallet = _wallet(client, "BCA")
    salary = _category(client, "Gaji", "income")
    client.post(
        "/transactions",
        json={
            "type": "income",
            "wallet_id": wallet["id"],
            "category_id": salary["id"],
            "amount": 5_000_000,
            "occurred_at": "2024-01-01 09:00",
        },
    )

    assert client.delete(f"/categories/{salary['id']}").status_code == 200
    assert client.get("/categories?type=income").get_json() == []

    summary = client.get(f"/wallets/{wallet['id']}/summary").get_json()
    assert summary["uncategorized"] == 5_000_000
    assert summary["income"] == 5_000_000

    summaries = client.get("/wallets/summaries").get_json()
    assert summaries == [
        {"walletId": wallet["id"], "income": 5_000_000, "expense": 0, "net": 5_000_000, "uncategorized": 5_000_000}
    ]


def test_wallet_summary_range_validation(client):
    wallet = _wallet(client, "BCA")

    assert client.get(f"/wallets/{wallet['id']}/summary?from=2024-13-01").status_code == 400
    ranged = client.get(f"/wallets/{wallet['id']}/summary?from=2024-01-01&to=2024-01-31").get_json()
    assert (ranged["from"], ranged["to"]) == ("2024-01-01", "2024-01-31")
    assert client.get("/wallets/999/summary").status_code == 404


def test_monthly_summary_endpoint(client):
    bca = _wallet(client, "BCA")
    cash = _wallet(client, "Cash")
    salary = _category(client, "Gaji", "income")
    food = _category(client, "Makan & Minum", "expense")
    for payload in (
        {"type": "income", "wallet_id": bca["id"], "category_id": salary["id"], "amount": 5_000_000, "occurred_at": "2024-01-01 09:00"},
        {"type": "expense", "wallet_id": bca["id"], "category_id": food["id"], "amount": 50_000, "occurred_at": "2024-01-19 12:30"},
    ):
        assert client.post("/transactions", json=payload).status_code == 201
    _transfer(client, bca, cash)

    body = client.get("/reports/monthly-summary?month=2024-01").get_json()

    assert body["summary"] == {"totalExpense": 50_000, "totalIncome": 5_000_000, "net": 4_950_000}
    assert body["period"]["start"] == "2024-01-01T00:00:00.000Z"
    assert len(body["byCategory"]) == 2

    invalid = client.get("/reports/monthly-summary?month=2024-1")
    assert invalid.status_code == 400
    assert invalid.get_json()["error"] == "validation_error"


def test_corrupt_transfer_is_an_internal_error(app, client):
    source = _wallet(client, "A")
    destination = _wallet(client, "B")
    result = _transfer(client, source, destination)

    with app.app_context():
        with session_scope() as session:
            session.delete(session.get(Transaction, result["incoming"]["id"]))

    response = client.get("/transactions")
    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error"}

    balances = client.get("/balances")
    assert balances.status_code == 500
    assert balances.get_json() == {"error": "internal_error"}


def test_unknown_route_is_json(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.get_json()["error"] == "not_found"


def test_out_of_range_integers_are_client_errors(client):
    wallet = _wallet(client, "BCA")

    response = client.post(
        "/transactions",
        json={"type": "expense", "wallet_id": wallet["id"], "amount": 2**63, "occurred_at": "2024-01-01 08:00"},
    )
    assert response.status_code == 400
    assert "amount" in response.get_json()["errors"]

    assert client.get("/wallets/99999999999999999999").status_code == 404
    assert client.get("/transactions/99999999999999999999").status_code == 404
