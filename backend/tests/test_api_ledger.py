import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tradebook.api.deps import db
from tradebook.core.security import create_access_token, hash_password
from tradebook.db.base import Base
from tradebook.main import app
from tradebook.models.user import User


@pytest.fixture()
def client():
    eng = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(eng)
    TestSession = sessionmaker(bind=eng, autoflush=False, autocommit=False, future=True)

    def _db():
        s = TestSession()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[db] = _db
    try:
        with TestClient(app) as c:
            c.session_factory = TestSession
            yield c
    finally:
        app.dependency_overrides.clear()
        eng.dispose()


def _auth(role: str = "admin") -> dict:
    return {"Authorization": f"Bearer {create_access_token('tester', role)}"}


def _post(client, path: str, body: dict, role: str = "admin"):
    r = client.post(path, json=body, headers=_auth(role))
    assert r.status_code == 200, r.text
    return r.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_requires_token(client):
    assert client.get("/account-receivables").status_code in (401, 403)
    r = client.get("/account-receivables", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert r.json()["detail"] == "invalid_token"


def test_viewer_cannot_create_accounts(client):
    r = client.post("/account-receivables", json={"name": "Client"}, headers=_auth("viewer"))
    assert r.status_code == 403
    assert r.json()["detail"] == "admin_only"


def test_login_issues_token(client):
    s = client.session_factory()
    s.add(User(username="clerk", password_hash=hash_password("secret99"), role="viewer"))
    s.commit()
    s.close()

    r = client.post("/auth/login", json={"username": "clerk", "password": "secret99"})
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "viewer"
    assert client.get("/account-payables", headers={"Authorization": f"Bearer {body['access_token']}"}).status_code == 200

    r = client.post("/auth/login", json={"username": "clerk", "password": "wrong-pass"})
    assert r.status_code == 401


def test_receivable_ledger_endpoint(client):
    ar = _post(client, "/account-receivables", {"name": "Khan Builders", "initial_balance": "100.00"})
    assert ar["ar_id"] == "AR-0001"

    _post(client, "/transactions", {
        "type": "sale", "date": "2026-01-10", "total_amount": "1000.00", "paid_amount": "200.00",
        "account_receivable_id": ar["id"],
    })
    _post(client, "/transactions", {
        "type": "receive_able", "date": "2026-02-01", "paid_amount": "300.00",
        "account_receivable_id": ar["id"],
    })
    _post(client, "/transactions", {
        "type": "sale_return", "date": "2026-02-03", "total_amount": "400.00", "paid_amount": "0.00",
        "account_receivable_id": ar["id"],
    })

    r = client.get(
        f"/account-receivables/{ar['id']}/ledger",
        params={"date_from": "2026-02-01", "date_to": "2026-02-28"},
        headers=_auth("viewer"),
    )
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["kind"] == "receivable"
    assert body["account_name"] == "Khan Builders"
    assert Decimal(body["opening_balance"]) == Decimal("900")
    assert [row["type"] for row in body["rows"]] == ["receive_able", "sale_return"]
    assert [Decimal(row["balance"]) for row in body["rows"]] == [Decimal("600"), Decimal("200")]
    assert Decimal(body["closing_balance"]) == Decimal("200")
    assert body["rows"][1]["display_debit"] == "-400.00"
    assert body["rows"][1]["display_credit"] == "-"
    assert body["rows"][1]["display_description"] == "Client returned goods"
    assert body["display_opening_balance"] == "900.00"


def test_payable_ledger_endpoint(client):
    ap = _post(client, "/account-payables", {"name": "Lucky Cement"})

    _post(client, "/transactions", {
        "type": "purchase", "date": "2026-01-05", "total_amount": "500.00", "paid_amount": "100.00",
        "account_payable_id": ap["id"], "mode_of_payment": "cash",
    })
    _post(client, "/transactions", {
        "type": "pay_able", "date": "2026-01-06", "paid_amount": "800.00",
        "account_payable_id": ap["id"],
    })

    r = client.get(
        f"/account-payables/{ap['id']}/ledger",
        params={"date_from": "2026-01-01", "date_to": "2026-01-31"},
        headers=_auth(),
    )
    assert r.status_code == 200, r.text
    body = r.json()

    assert Decimal(body["opening_balance"]) == Decimal("0")
    assert [Decimal(row["balance"]) for row in body["rows"]] == [Decimal("400"), Decimal("-400")]
    assert body["display_closing_balance"] == "(400.00)"
    assert Decimal(body["total_debit"]) == Decimal("900")
    assert Decimal(body["total_credit"]) == Decimal("500")


def test_ledger_rejects_inverted_range_and_unknown_account(client):
    ap = _post(client, "/account-payables", {"name": "Vendor"})

    r = client.get(
        f"/account-payables/{ap['id']}/ledger",
        params={"date_from": "2026-02-01", "date_to": "2026-01-01"},
        headers=_auth(),
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "invalid_date_range"

    r = client.get("/account-receivables/nope/ledger", params={"date_from": "2026-01-01"}, headers=_auth())
    assert r.status_code == 404
    assert r.json()["detail"] == "account_not_found"


def test_transaction_validation_and_filters(client):
    ar = _post(client, "/account-receivables", {"name": "Client"})

    r = client.post("/transactions", json={"type": "sale", "total_amount": "10.00"}, headers=_auth())
    assert r.status_code == 400
    assert r.json()["detail"] == "account_link_required"

    r = client.post(
        "/transactions",
        json={"type": "sale", "total_amount": "-10.00", "account_receivable_id": ar["id"]},
        headers=_auth(),
    )
    assert r.status_code == 422

    r = client.post(
        "/transactions",
        json={"type": "sale", "total_amount": "10.005", "account_receivable_id": ar["id"]},
        headers=_auth(),
    )
    assert r.status_code == 422

    first = _post(client, "/transactions", {
        "type": "sale", "date": "2026-01-01", "total_amount": "10.00", "account_receivable_id": ar["id"],
    })
    _post(client, "/transactions", {
        "type": "receive_able", "date": "2026-03-01", "paid_amount": "5.00", "account_receivable_id": ar["id"],
    })

    r = client.get(
        "/transactions",
        params={"account_receivable_id": ar["id"], "date_from": "2026-01-01", "date_to": "2026-01-31"},
        headers=_auth(),
    )
    assert [t["id"] for t in r.json()] == [first["id"]]

    r = client.delete(f"/transactions/{first['id']}", headers=_auth())
    assert r.json() == {"ok": True}
    assert client.get(f"/transactions/{first['id']}", headers=_auth()).status_code == 404

    audit = client.get("/audit", params={"entity_id": first["id"]}, headers=_auth()).json()
    assert sorted(a["action"] for a in audit) == ["tx.create", "tx.delete"]


def test_update_transaction_rebooks_the_ledger(client):
    ar = _post(client, "/account-receivables", {"name": "Client"})
    tx = _post(client, "/transactions", {
        "type": "sale", "date": "2026-01-10", "total_amount": "1000.00", "paid_amount": "0.00",
        "account_receivable_id": ar["id"],
    })

    r = client.patch(f"/transactions/{tx['id']}", json={"total_amount": "600.00"}, headers=_auth())
    assert r.status_code == 200, r.text
    assert Decimal(r.json()["total_amount"]) == Decimal("600")
    assert r.json()["date"] == "2026-01-10"

    body = client.get(
        f"/account-receivables/{ar['id']}/ledger", params={"date_to": "2026-01-31"}, headers=_auth()
    ).json()
    assert Decimal(body["closing_balance"]) == Decimal("600")

    audit = client.get("/audit", params={"entity_id": tx["id"]}, headers=_auth()).json()
    assert "tx.update" in [a["action"] for a in audit]


def test_update_transaction_revalidates(client):
    ar = _post(client, "/account-receivables", {"name": "Client"})
    tx = _post(client, "/transactions", {
        "type": "sale", "date": "2026-01-10", "total_amount": "100.00", "account_receivable_id": ar["id"],
    })

    r = client.patch(f"/transactions/{tx['id']}", json={"type": "purchase"}, headers=_auth())
    assert r.status_code == 400
    assert r.json()["detail"] == "account_link_required"

    r = client.patch(f"/transactions/{tx['id']}", json={"total_amount": "-5.00"}, headers=_auth())
    assert r.status_code == 422

    r = client.patch(f"/transactions/{tx['id']}", json={"account_receivable_id": "missing"}, headers=_auth())
    assert r.status_code == 404
    assert r.json()["detail"] == "account_not_found"

    r = client.patch("/transactions/missing", json={"total_amount": "5.00"}, headers=_auth())
    assert r.status_code == 404
    assert r.json()["detail"] == "tx_not_found"

    r = client.patch(f"/transactions/{tx['id']}", json={"total_amount": "5.00"}, headers=_auth("viewer"))
    assert r.status_code == 403

    assert Decimal(client.get(f"/transactions/{tx['id']}", headers=_auth()).json()["total_amount"]) == Decimal("100")


def test_delete_account_keeps_its_transactions_unlinked(client):
    ap = _post(client, "/account-payables", {"name": "Vendor"})
    tx = _post(client, "/transactions", {
        "type": "purchase", "date": "2026-01-05", "total_amount": "500.00", "paid_amount": "0.00",
        "account_payable_id": ap["id"],
    })

    assert client.delete(f"/account-payables/{ap['id']}", headers=_auth("viewer")).status_code == 403

    r = client.delete(f"/account-payables/{ap['id']}", headers=_auth())
    assert r.json() == {"ok": True}
    assert client.get(f"/account-payables/{ap['id']}", headers=_auth()).status_code == 404
    assert client.get(f"/account-payables/{ap['id']}/ledger", headers=_auth()).status_code == 404

    kept = client.get(f"/transactions/{tx['id']}", headers=_auth()).json()
    assert kept["account_payable_id"] is None

    audit = client.get("/audit", params={"entity_id": ap["id"]}, headers=_auth()).json()
    deleted = [a for a in audit if a["action"] == "account_payable.delete"]
    assert deleted[0]["details"]["unlinked_transactions"] == 1


def test_delete_receivable_account(client):
    ar = _post(client, "/account-receivables", {"name": "Client"})

    assert client.delete(f"/account-receivables/{ar['id']}", headers=_auth()).json() == {"ok": True}
    assert client.delete(f"/account-receivables/{ar['id']}", headers=_auth()).status_code == 404
    assert client.get("/account-receivables", headers=_auth()).json() == []
