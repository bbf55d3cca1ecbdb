from datetime import date, timedelta

from src.db.core import TransactionDB


TODAY = date.today()


def make_transaction(client, **overrides):
    payload = {
        "transaction_date": TODAY.isoformat(),
        "description": "Office supplies",
        "amount": 25,
        "transaction_type": "Expense",
        "category": "Supplies",
        "notes": None,
    }
    payload.update(overrides)
    response = client.post("/api/transactions", json=payload)
    assert response.status_code == 200, response.text
    return response.json()["transaction_id"]


def test_create_returns_generated_id(alice):
    response = alice.post("/api/transactions", json={
        "transaction_date": "2026-01-15",
        "description": "  Invoice #42  ",
        "amount": "1250.456",
        "transaction_type": "Income",
        "category": "Sales",
        "notes": "Paid by wire",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert isinstance(body["transaction_id"], int)

    rows = alice.get("/api/transactions", params={"id": body["transaction_id"]}).json()
    assert len(rows) == 1
    assert rows[0]["description"] == "Invoice #42"
    assert rows[0]["amount"] == 1250.46
    assert rows[0]["transaction_type"] == "Income"
    assert rows[0]["transaction_date"] == "2026-01-15"


def test_create_rejects_invalid_payload(alice):
    missing_amount = alice.post("/api/transactions", json={
        "transaction_date": TODAY.isoformat(),
        "transaction_type": "Expense",
    })
    bad_type = alice.post("/api/transactions", json={
        "transaction_date": TODAY.isoformat(),
        "amount": 10,
        "transaction_type": "Transfer",
    })

    assert missing_amount.status_code == 400
    assert bad_type.status_code == 400
    assert "error" in bad_type.json()


def test_list_is_scoped_to_the_session_user(alice, bob):
    make_transaction(alice, description="Alice rent")
    make_transaction(bob, description="Bob rent")

    alice_rows = alice.get("/api/transactions").json()
    bob_rows = bob.get("/api/transactions").json()

    assert [r["description"] for r in alice_rows] == ["Alice rent"]
    assert [r["description"] for r in bob_rows] == ["Bob rent"]


def test_list_orders_newest_first(alice):
    make_transaction(alice, description="old", transaction_date=(TODAY - timedelta(days=5)).isoformat())
    make_transaction(alice, description="new", transaction_date=TODAY.isoformat())
    make_transaction(alice, description="middle", transaction_date=(TODAY - timedelta(days=2)).isoformat())

    rows = alice.get("/api/transactions").json()

    assert [r["description"] for r in rows] == ["new", "middle", "old"]


def test_search_matches_description_category_or_notes_case_insensitively(alice):
    make_transaction(alice, description="Office RENT October", category="Facilities")
    make_transaction(alice, description="Storage unit", category="Rent")
    make_transaction(alice, description="Deposit", category="Misc", notes="parent company rental deposit")
    make_transaction(alice, description="Coffee", category="Food", notes=None)

    rows = alice.get("/api/transactions", params={"search": "rent"}).json()

    assert sorted(r["description"] for r in rows) == ["Deposit", "Office RENT October", "Storage unit"]


def test_filters_combine_with_and(alice):
    make_transaction(alice, description="in-range expense", transaction_date="2026-03-10")
    make_transaction(alice, description="in-range income", transaction_type="Income", transaction_date="2026-03-12")
    make_transaction(alice, description="too early", transaction_date="2026-02-28")
    make_transaction(alice, description="too late", transaction_date="2026-04-01")

    rows = alice.get("/api/transactions", params={
        "type": "Expense",
        "start_date": "2026-03-01",
        "end_date": "2026-03-31",
    }).json()

    assert [r["description"] for r in rows] == ["in-range expense"]


def test_date_range_is_inclusive(alice):
    make_transaction(alice, description="first day", transaction_date="2026-03-01")
    make_transaction(alice, description="last day", transaction_date="2026-03-31")

    rows = alice.get("/api/transactions", params={"start_date": "2026-03-01", "end_date": "2026-03-31"}).json()

    assert len(rows) == 2


def test_limit_caps_results(alice):
    for i in range(5):
        make_transaction(alice, description=f"t{i}")

    assert len(alice.get("/api/transactions", params={"limit": 3}).json()) == 3
    assert alice.get("/api/transactions", params={"limit": 0}).status_code == 400


def test_id_filter_does_not_leak_other_users_rows(alice, bob):
    bob_id = make_transaction(bob, description="Bob private")

    assert alice.get("/api/transactions", params={"id": bob_id}).json() == []


def test_invalid_type_filter_is_bad_request(alice):
    response = alice.get("/api/transactions", params={"type": "Refund"})

    assert response.status_code == 400
    assert "error" in response.json()


def test_recent_defaults_to_ten_newest(alice):
    for i in range(12):
        make_transaction(alice, description=f"day {i}", transaction_date=(TODAY - timedelta(days=i)).isoformat())

    rows = alice.get("/api/transactions/recent").json()
    assert len(rows) == 10
    assert rows[0]["description"] == "day 0"
    assert rows[-1]["description"] == "day 9"

    assert len(alice.get("/api/transactions/recent", params={"limit": 3}).json()) == 3


def test_update_replaces_all_fields(alice):
    transaction_id = make_transaction(alice, description="Draft", notes="to fix")

    response = alice.put(f"/api/transactions/{transaction_id}", json={
        "transaction_date": "2026-02-01",
        "description": "Final",
        "amount": 99.5,
        "transaction_type": "Income",
        "category": "Services",
        "notes": None,
    })

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Transaction updated"}
    row = alice.get("/api/transactions", params={"id": transaction_id}).json()[0]
    assert row["description"] == "Final"
    assert row["amount"] == 99.5
    assert row["transaction_type"] == "Income"
    assert row["category"] == "Services"
    assert row["notes"] is None
    assert row["transaction_date"] == "2026-02-01"


def test_update_of_missing_or_foreign_transaction_is_not_found(alice, bob):
    bob_id = make_transaction(bob, description="Bob's")
    payload = {"transaction_date": TODAY.isoformat(), "amount": 1, "transaction_type": "Expense"}

    foreign = alice.put(f"/api/transactions/{bob_id}", json=payload)
    missing = alice.put("/api/transactions/999999", json=payload)

    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == {"error": "Transaction not found"}
    assert bob.get("/api/transactions", params={"id": bob_id}).json()[0]["description"] == "Bob's"


def test_delete_removes_owned_transaction(alice):
    transaction_id = make_transaction(alice)

    response = alice.delete(f"/api/transactions/{transaction_id}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Transaction deleted"}
    assert alice.get("/api/transactions").json() == []
    assert alice.delete(f"/api/transactions/{transaction_id}").status_code == 404


def test_delete_of_another_users_transaction_leaves_it_intact(alice, bob, db_session):
    bob_id = make_transaction(bob, description="keep me")

    response = alice.delete(f"/api/transactions/{bob_id}")

    assert response.status_code == 404
    assert response.json() == {"error": "Transaction not found"}
    assert db_session.get(TransactionDB, bob_id) is not None


def test_totals_use_type_for_sign(alice):
    make_transaction(alice, transaction_type="Expense", amount=50)
    make_transaction(alice, transaction_type="Income", amount=200)

    response = alice.get("/api/transactions/totals")

    assert response.status_code == 200
    assert response.json() == {"total_sales": 200, "total_expenses": 50, "net_profit": 150}


def test_totals_with_no_transactions_are_zero(alice):
    assert alice.get("/api/transactions/totals").json() == {
        "total_sales": 0,
        "total_expenses": 0,
        "net_profit": 0,
    }


def test_totals_respect_the_days_window(alice):
    make_transaction(alice, transaction_type="Income", amount=100, transaction_date=(TODAY - timedelta(days=3)).isoformat())
    make_transaction(alice, transaction_type="Income", amount=1000, transaction_date=(TODAY - timedelta(days=45)).isoformat())

    assert alice.get("/api/transactions/totals").json()["total_sales"] == 100
    assert alice.get("/api/transactions/totals", params={"days": 60}).json()["total_sales"] == 1100
    assert alice.get("/api/transactions/totals", params={"days": 1}).json()["total_sales"] == 0


def test_totals_reject_an_unbounded_window(alice):
    response = alice.get("/api/transactions/totals", params={"days": 10000000})

    assert response.status_code == 400
    assert "error" in response.json()
