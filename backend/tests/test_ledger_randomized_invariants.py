from datetime import date, datetime, timedelta
from decimal import Decimal
from random import Random

from tradebook.services.ledger import LedgerKind, build_window, compute_ledger

AR_TYPES = [
    "sale",
    "receivable_advance",
    "advance_sale_inventory",
    "advance_sale_payment",
    "receive_able",
    "advance_account_receivable_payment",
    "pay_able_client",
    "sale_return",
    "deposit",
]

AP_TYPES = [
    "purchase",
    "advance_purchase_inventory",
    "payable_advance",
    "advance_purchase_payment",
    "pay_able",
    "receive_able_vendor",
    "purchase_return",
    "transfer",
]


def _money(rng: Random) -> Decimal:
    return Decimal(rng.randint(0, 500000)) / Decimal(100)


def _random_history(rng: Random, types: list[str], n: int) -> list[dict]:
    start = date(2026, 1, 1)
    base = datetime(2026, 1, 1, 8, 0, 0)
    out = []
    for i in range(n):
        d = start + timedelta(days=rng.randint(0, 90))
        total = _money(rng) if rng.random() < 0.9 else None
        if total is not None and rng.random() < 0.1:
            total = -total
        out.append(
            {
                "id": f"tx-{i:04d}",
                "type": rng.choice(types),
                "date": d if rng.random() < 0.95 else None,
                "created_at": base + timedelta(seconds=rng.randint(0, 10**6)),
                "total_amount": total,
                "paid_amount": _money(rng) if rng.random() < 0.8 else None,
                "description": None,
            }
        )
    return out


def test_receivable_running_balance_recurrence():
    rng = Random(1337)
    txs = _random_history(rng, AR_TYPES, 300)

    rows = compute_ledger(LedgerKind.RECEIVABLE, Decimal("250.00"), txs)
    assert len(rows) == len(txs)

    prev = Decimal("250.00")
    for r in rows:
        assert r.balance == prev + r.debit - r.credit
        prev = r.balance


def test_payable_running_balance_recurrence():
    rng = Random(2025)
    txs = _random_history(rng, AP_TYPES, 300)

    rows = compute_ledger(LedgerKind.PAYABLE, Decimal("-40.10"), txs)

    prev = Decimal("-40.10")
    for r in rows:
        assert r.balance == prev + r.credit - r.debit
        prev = r.balance


def test_return_rows_are_non_positive_with_source_magnitudes():
    rng = Random(99)
    txs = []
    for i in range(100):
        txs.append(
            {
                "id": f"r{i}",
                "type": rng.choice(["sale_return", "purchase_return"]),
                "date": date(2026, 2, 1) + timedelta(days=i),
                "created_at": None,
                "total_amount": _money(rng),
                "paid_amount": _money(rng),
                "description": None,
            }
        )

    for r in compute_ledger(LedgerKind.RECEIVABLE, 0, [t for t in txs if t["type"] == "sale_return"]):
        assert r.debit <= 0 and r.credit <= 0
        assert abs(r.debit) == r.total_amount
        assert abs(r.credit) == r.paid_amount

    for r in compute_ledger(LedgerKind.PAYABLE, 0, [t for t in txs if t["type"] == "purchase_return"]):
        assert r.debit <= 0 and r.credit <= 0
        assert abs(r.debit) == r.paid_amount
        assert abs(r.credit) == r.total_amount


def test_repeated_runs_are_identical():
    rng = Random(4242)
    txs = _random_history(rng, AR_TYPES + AP_TYPES, 200)

    for kind in (LedgerKind.RECEIVABLE, LedgerKind.PAYABLE):
        runs = [compute_ledger(kind, Decimal("10.00"), txs) for _ in range(3)]
        assert runs[0] == runs[1] == runs[2]


def test_randomized_subrange_matches_fullrange_state():
    rng = Random(7)
    txs = _random_history(rng, AR_TYPES, 250)
    # undated rows only join unbounded windows
    dated = [t for t in txs if t["date"] is not None]

    full = build_window(LedgerKind.RECEIVABLE, Decimal("0"), dated)
    by_id = {r.id: r for r in full.rows}

    for _ in range(10):
        a = date(2026, 1, 1) + timedelta(days=rng.randint(0, 90))
        b = a + timedelta(days=rng.randint(0, 30))
        sub = build_window(LedgerKind.RECEIVABLE, Decimal("0"), dated, a, b)
        for r in sub.rows:
            assert a <= r.date <= b
            assert r.balance == by_id[r.id].balance
