# scoring.py
from __future__ import annotations
from typing import Callable, Dict, List, Tuple, Any

from ..rules.ruleset import (
    RuleOutcome,
    points_for_retailer,
    points_for_total,
    points_for_item_count,
    points_for_item_descriptions,
    points_for_llm,
    points_for_odd_day,
    points_for_purchase_time,
)
from ..schemas import ReceiptIn
from ..utils.logging import logger

# This build was not generated by a large language model, so the
# llm_generated rule is always fed False on ingestion.
GENERATED_BY_LLM = False

Rule = Callable[[ReceiptIn, bool], RuleOutcome]

# -----------------------------
# Rule table (name -> evaluator over a receipt)
# -----------------------------
DEFAULT_RULES: List[Tuple[str, Rule]] = [
    ("retailer_name", lambda r, llm: points_for_retailer(r.retailer)),
    ("round_total", lambda r, llm: points_for_total(r.total)),
    ("item_count", lambda r, llm: points_for_item_count(r.items)),
    ("item_description", lambda r, llm: points_for_item_descriptions(r.items)),
    ("llm_generated", lambda r, llm: points_for_llm(r.total, llm)),
    ("odd_purchase_day", lambda r, llm: points_for_odd_day(r.purchase_date)),
    ("purchase_time_window", lambda r, llm: points_for_purchase_time(r.purchase_time)),
]

# -----------------------------
# Main entry
# -----------------------------
def score_receipt(
    receipt: ReceiptIn,
    generated_by_llm: bool = GENERATED_BY_LLM,
    rules: List[Tuple[str, Rule]] | None = None,
) -> Dict[str, Any]:
    """
    Returns:
      {
        "points": int,
        "rules": {rule_name: int},       # every rule, zero included
        "skipped": {rule_name: str},     # rules that hit an unparsable field
      }
    Rules are independent; a rule that cannot parse its field scores 0
    and the rest still run.
    """
    total = 0
    breakdown: Dict[str, int] = {}
    skipped: Dict[str, str] = {}

    for name, rule in (rules if rules is not None else DEFAULT_RULES):
        outcome = rule(receipt, generated_by_llm)
        breakdown[name] = outcome.points
        total += outcome.points
        if outcome.skipped:
            skipped[name] = outcome.skipped
            logger.warning("Rule %s degraded for retailer %r: %s", name, receipt.retailer, outcome.skipped)

    return {"points": int(total), "rules": breakdown, "skipped": skipped}
