"""Tests for audit rule derivation from the expense history."""

import pytest

from rentops.integrations.exceptions import RecordUpdateError
from rentops.services.audit_rule_seed_service import (
    AuditRuleSeedService,
    extract_keywords,
    normalize_item_name,
    round_price,
)
from tests.fakes import FakeAuditRuleRepository, FakeExpenseRepository, expense


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Llanta trasera", "Llantas"),
        ("CAMBIO DE ACEITE 20W50", "Cambio de Aceite"),
        ("Batería nueva", "Batería"),
        ("Piñon y cadena", "Kit de Arrastre"),
        ("  pastillas de freno ", "Frenos"),
        ("lavado", "Lavado de Vehículo"),
        ("espejo retrovisor", "Espejo Retrovisor"),
    ],
)
def test_normalize_item_name(raw, expected):
    assert normalize_item_name(raw) == expected


def test_extract_keywords_drops_short_words_and_accents():
    assert extract_keywords("Batería de moto nueva") == ["bateria", "moto", "nueva"]


def test_round_price_rounds_half_up():
    assert round_price(10.126) == 10.13
    assert round_price(10.124) == 10.12
    assert round_price(125.0) == 125.0


def test_build_rules_groups_recurring_items():
    service = AuditRuleSeedService(FakeExpenseRepository([]), FakeAuditRuleRepository())
    rules = service.build_rules(
        [
            expense(1, "Llanta delantera", 100),
            expense(2, "Caucho trasero", 150),
            expense(3, "Espejo", 40),
        ]
    )

    assert len(rules) == 1
    rule = rules[0]
    assert rule.item_name == "Llantas"
    assert rule.avg_price == 125.0
    assert rule.max_allowed_price == 156.25
    assert rule.expected_frequency_days == 180
    assert rule.keywords == ["llanta", "delantera", "caucho", "trasero"]
    assert rule.is_active


def test_build_rules_defaults_category_and_frequency():
    service = AuditRuleSeedService(FakeExpenseRepository([]), FakeAuditRuleRepository())
    rules = service.build_rules(
        [
            expense(1, "Filtro de aire", 20, category=None),
            expense(2, "filtro gasolina", 30, category="Repuestos"),
        ]
    )

    assert rules[0].item_name == "Filtros"
    assert rules[0].category == "Mantenimiento"
    assert rules[0].expected_frequency_days == 60


def test_build_rules_caps_keywords():
    service = AuditRuleSeedService(FakeExpenseRepository([]), FakeAuditRuleRepository())
    rules = service.build_rules(
        [
            expense(1, "bateria grande original marca", 10),
            expense(2, "bateria pequena generica sellada", 10),
        ]
    )

    assert len(rules[0].keywords) == 5


def test_run_replaces_rules():
    rules_repo = FakeAuditRuleRepository()
    service = AuditRuleSeedService(
        FakeExpenseRepository([expense(1, "peaje norte", 5), expense(2, "Peaje sur", 7)]),
        rules_repo,
    )

    rules = service.run()

    assert [rule.item_name for rule in rules] == ["Peaje"]
    assert rules_repo.replaced == [rules]


def test_run_dry_run_writes_nothing():
    rules_repo = FakeAuditRuleRepository()
    service = AuditRuleSeedService(
        FakeExpenseRepository([expense(1, "peaje norte", 5), expense(2, "Peaje sur", 7)]),
        rules_repo,
    )

    assert len(service.run(dry_run=True)) == 1
    assert rules_repo.replaced == []


def test_run_without_recurring_items_keeps_existing_rules():
    rules_repo = FakeAuditRuleRepository()
    service = AuditRuleSeedService(FakeExpenseRepository([expense(1, "espejo", 40)]), rules_repo)

    assert service.run() == []
    assert rules_repo.replaced == []


def test_run_propagates_write_errors():
    service = AuditRuleSeedService(
        FakeExpenseRepository([expense(1, "peaje norte", 5), expense(2, "Peaje sur", 7)]),
        FakeAuditRuleRepository(fail=True),
    )

    with pytest.raises(RecordUpdateError):
        service.run()
