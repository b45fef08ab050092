"""Tests for the table repositories against a mocked PostgREST builder."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from rentops.integrations.exceptions import RecordQueryError, RecordUpdateError
from rentops.repositories.audit_rule_repository import AuditRuleRepository
from rentops.repositories.expense_repository import ExpenseRepository
from rentops.repositories.payment_repository import PaymentRepository
from rentops.schemas.audit_rule import AuditRuleCreate


def _response(data):
    return MagicMock(data=data)


def test_get_stale_proofs_filters_by_date_and_reference():
    client = MagicMock()
    select = client.table.return_value.select
    lt = select.return_value.lt
    is_ = lt.return_value.not_.is_
    is_.return_value.execute.return_value = _response(
        [
            {"id": 7, "proof_url": "https://h/public/proofs/a.jpg", "payment_date": "2025-10-02"},
            {"id": 8, "proof_url": "b.jpg", "payment_date": "2025-09-30"},
        ]
    )

    records = PaymentRepository(client).get_stale_proofs(date(2025, 11, 1))

    client.table.assert_called_with("payments")
    select.assert_called_once_with("id, proof_url, payment_date")
    lt.assert_called_once_with("payment_date", "2025-11-01")
    is_.assert_called_once_with("proof_url", "null")
    assert [record.id for record in records] == [7, 8]
    assert records[0].proof_reference == "https://h/public/proofs/a.jpg"
    assert records[1].payment_date == date(2025, 9, 30)


def test_get_stale_proofs_wraps_errors():
    client = MagicMock()
    chain = client.table.return_value.select.return_value.lt.return_value.not_.is_.return_value
    chain.execute.side_effect = RuntimeError("permission denied")

    with pytest.raises(RecordQueryError) as exc_info:
        PaymentRepository(client).get_stale_proofs(date(2025, 11, 1))

    assert exc_info.value.context["table"] == "payments"


def test_clear_proof_references_sets_null():
    client = MagicMock()
    update = client.table.return_value.update
    update.return_value.in_.return_value.execute.return_value = _response([])

    assert PaymentRepository(client).clear_proof_references([1, 2]) == 2

    update.assert_called_once_with({"proof_url": None})
    update.return_value.in_.assert_called_once_with("id", [1, 2])


def test_clear_proof_references_skips_empty_list():
    client = MagicMock()
    assert PaymentRepository(client).clear_proof_references([]) == 0
    client.table.assert_not_called()


def test_clear_proof_references_wraps_errors():
    client = MagicMock()
    client.table.return_value.update.return_value.in_.return_value.execute.side_effect = RuntimeError("boom")

    with pytest.raises(RecordUpdateError):
        PaymentRepository(client).clear_proof_references([1])


def test_expenses_are_read_page_by_page():
    client = MagicMock()
    order = client.table.return_value.select.return_value.order
    range_ = order.return_value.range
    range_.return_value.execute.side_effect = [
        _response([{"id": 1, "item": "Llanta", "category": None, "total_amount": "120.5", "date": "2025-01-01"}]),
        _response([{"id": 2, "item": None, "category": "Combustible", "total_amount": None, "date": None}]),
        _response([]),
    ]

    expenses = ExpenseRepository(client).get_all(page_size=1)

    assert [call.args for call in range_.call_args_list] == [(0, 0), (1, 1), (2, 2)]
    assert all(call.args == ("id",) for call in order.call_args_list)
    assert order.call_count == 3
    assert expenses[0].total_amount == 120.5
    assert expenses[1].item == ""
    assert expenses[1].total_amount == 0.0


def test_replace_all_deletes_then_inserts():
    client = MagicMock()
    table = client.table.return_value
    rule = AuditRuleCreate(
        item_name="Frenos",
        category="Mantenimiento",
        avg_price=80.0,
        max_allowed_price=100.0,
        expected_frequency_days=90,
        keywords=["freno"],
    )

    assert AuditRuleRepository(client).replace_all([rule]) == 1

    client.table.assert_called_with("expense_audit_rules")
    table.delete.return_value.neq.assert_called_once_with("id", "00000000-0000-0000-0000-000000000000")
    table.insert.assert_called_once_with([rule.model_dump()])


def test_replace_all_stops_when_delete_fails():
    client = MagicMock()
    table = client.table.return_value
    table.delete.return_value.neq.return_value.execute.side_effect = RuntimeError("boom")

    with pytest.raises(RecordUpdateError):
        AuditRuleRepository(client).replace_all([])

    table.insert.assert_not_called()
