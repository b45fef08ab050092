"""
Seed expense audit rules from the expense history.

Free-text item names are folded into canonical names, recurring items are
grouped, and each group yields a rule with its average price, a 25% price
tolerance and an expected purchase frequency.
"""
import math
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Dict, List

from rentops.core.logging import get_logger
from rentops.repositories.audit_rule_repository import AuditRuleRepository
from rentops.repositories.expense_repository import ExpenseRepository
from rentops.schemas.audit_rule import AuditRuleCreate, ExpenseRecord

logger = get_logger(__name__)

DEFAULT_CATEGORY = "Mantenimiento"
DEFAULT_FREQUENCY_DAYS = 60
PRICE_TOLERANCE = 1.25
MIN_OCCURRENCES = 2
MAX_KEYWORDS = 5

# First match wins
CANONICAL_ITEMS = [
    (("llanta", "caucho"), "Llantas"),
    (("aceite", "lubricante", "oil"), "Cambio de Aceite"),
    (("freno", "pastilla", "bandas"), "Frenos"),
    (("bateria",), "Batería"),
    (("amortiguador", "suspension"), "Amortiguadores"),
    (("filtro",), "Filtros"),
    (("bujia",), "Bujías"),
    (("kit de arrastre", "cadena", "pinon"), "Kit de Arrastre"),
    (("lavado",), "Lavado de Vehículo"),
    (("bombillo", "lampara", "luz"), "Luces / Bombillos"),
    (("parqueadero", "estacionamiento"), "Parqueadero"),
    (("peaje",), "Peaje"),
    (("gasolina", "combustible"), "Combustible"),
]

FREQUENCY_DAYS = {
    "Llantas": 180,
    "Batería": 365,
    "Frenos": 90,
    "Cambio de Aceite": 30,
    "Kit de Arrastre": 120,
    "Lavado de Vehículo": 7,
}


def strip_accents(text: str) -> str:
    """Remove combining marks ("batería" -> "bateria")."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_item_name(name: str) -> str:
    """Map a free-text item to its canonical name, or title-case it."""
    n = strip_accents(name.lower().strip())

    for needles, canonical in CANONICAL_ITEMS:
        if any(needle in n for needle in needles):
            return canonical

    return " ".join(word[:1].upper() + word[1:] for word in n.split(" "))


def extract_keywords(item: str) -> List[str]:
    """Accent-free words longer than three characters, in order."""
    words = re.split(r"\s+", item.lower())
    return [strip_accents(word) for word in words if len(word) > 3]


def round_price(value: float) -> float:
    """Round to cents, halves away from zero for positive prices."""
    return math.floor(value * 100 + 0.5) / 100


@dataclass
class _ItemGroup:
    category: str
    count: int = 0
    total_amount: float = 0.0
    keywords: Dict[str, None] = field(default_factory=dict)


class AuditRuleSeedService:
    """Build and store audit rules derived from recorded expenses."""

    def __init__(self, expenses: ExpenseRepository, rules: AuditRuleRepository):
        self.expenses = expenses
        self.rules = rules

    def build_rules(self, expenses: List[ExpenseRecord]) -> List[AuditRuleCreate]:
        """Group expenses by canonical name and derive one rule per recurring group."""
        groups: Dict[str, _ItemGroup] = {}

        for expense in expenses:
            name = normalize_item_name(expense.item)
            group = groups.get(name)
            if group is None:
                group = groups[name] = _ItemGroup(category=expense.category or DEFAULT_CATEGORY)

            group.count += 1
            group.total_amount += expense.total_amount
            for word in extract_keywords(expense.item):
                group.keywords.setdefault(word, None)

        rules: List[AuditRuleCreate] = []
        for name, group in groups.items():
            if group.count < MIN_OCCURRENCES:
                continue
            avg_price = group.total_amount / group.count
            rules.append(
                AuditRuleCreate(
                    item_name=name,
                    category=group.category,
                    avg_price=round_price(avg_price),
                    max_allowed_price=round_price(avg_price * PRICE_TOLERANCE),
                    expected_frequency_days=FREQUENCY_DAYS.get(name, DEFAULT_FREQUENCY_DAYS),
                    keywords=list(group.keywords)[:MAX_KEYWORDS],
                    is_active=True,
                )
            )
        return rules

    def run(self, dry_run: bool = False) -> List[AuditRuleCreate]:
        """
        Load expenses, build rules and replace the stored rule set.

        Args:
            dry_run: Build rules without writing them

        Returns:
            Rules built (and stored unless dry_run or empty)

        Raises:
            RecordQueryError: If expenses cannot be read
            RecordUpdateError: If the rules cannot be replaced
        """
        expenses = self.expenses.get_all()
        logger.info("audit_seed_expenses_loaded", count=len(expenses))

        rules = self.build_rules(expenses)
        logger.info("audit_seed_rules_built", count=len(rules))

        if not rules:
            logger.info("audit_seed_no_recurring_items")
            return rules

        if not dry_run:
            self.rules.replace_all(rules)
        return rules

