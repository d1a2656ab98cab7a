# receipt_processor/rules/ruleset.py
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_CEILING, ROUND_DOWN
from typing import NamedTuple, Optional, Sequence, Tuple

from ..schemas import ItemIn

# -----------------------------
# Points per rule
# -----------------------------
POINTS_PER_ALNUM_CHAR = 1
POINTS_ROUND_DOLLAR = 50
POINTS_QUARTER_MULTIPLE = 25
POINTS_PER_ITEM_PAIR = 5
DESCRIPTION_LENGTH_FACTOR = 3
DESCRIPTION_PRICE_MULTIPLIER = Decimal("0.2")
POINTS_LLM_GENERATED = 5
LLM_TOTAL_THRESHOLD = Decimal("10.00")
POINTS_ODD_DAY = 6
POINTS_TIME_WINDOW = 10

QUARTER = Decimal("0.25")
# amounts outside 1e-30 .. 1e15 are treated as unparsable
MAX_AMOUNT_EXPONENT = 15
MIN_AMOUNT_EXPONENT = -30
DATE_FORMAT = "%Y-%m-%d"
# inclusive on both ends, so 16:59 still counts
WINDOW_START_HOUR = 14
WINDOW_END_HOUR = 16

_ALNUM_RE = re.compile(r"[A-Za-z0-9]")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_HOUR_RE = re.compile(r"[+-]?[0-9]+")

class RuleOutcome(NamedTuple):
    """Points a rule awarded, and why it degraded to zero if a field was unparsable."""
    points: int
    skipped: Optional[str] = None

# -----------------------------
# Helpers
# -----------------------------
def parse_amount(value: str) -> Tuple[Optional[Decimal], Optional[str]]:
    """
    Parse a decimal-as-string money value.
    Returns (amount, None) or (None, reason). NaN, Infinity and amounts
    too large or too small to score are rejected.
    """
    try:
        amount = Decimal(value.strip())
    except (InvalidOperation, AttributeError):
        return None, f"cannot parse amount {value!r}"
    if not amount.is_finite():
        return None, f"amount {value!r} is not finite"
    if amount and not MIN_AMOUNT_EXPONENT <= amount.adjusted() <= MAX_AMOUNT_EXPONENT:
        return None, f"amount {value!r} is out of range"
    return amount, None

def is_whole(value: Decimal) -> bool:
    return value == value.to_integral_value(rounding=ROUND_DOWN)

# -----------------------------
# Rules
# -----------------------------
def points_for_retailer(retailer: str) -> RuleOutcome:
    """One point for every ASCII letter or digit in the retailer name."""
    return RuleOutcome(len(_ALNUM_RE.findall(retailer)) * POINTS_PER_ALNUM_CHAR)

def points_for_total(total: str) -> RuleOutcome:
    """
    50 points if the total is a round dollar amount with no cents,
    plus 25 if it is a multiple of 0.25. Both need a positive total.
    """
    amount, problem = parse_amount(total)
    if amount is None:
        return RuleOutcome(0, problem)
    points = 0
    if amount > 0:
        if is_whole(amount):
            points += POINTS_ROUND_DOLLAR
        # division + truncation, not modulo
        if is_whole(amount / QUARTER):
            points += POINTS_QUARTER_MULTIPLE
    return RuleOutcome(points)

def points_for_item_count(items: Sequence[ItemIn]) -> RuleOutcome:
    """5 points for every two items on the receipt."""
    return RuleOutcome((len(items) // 2) * POINTS_PER_ITEM_PAIR)

def points_for_item_descriptions(items: Sequence[ItemIn]) -> RuleOutcome:
    """
    For each item whose trimmed description length is a multiple of 3,
    award ceil(price * 0.2). An empty trimmed description counts (0 % 3 == 0).
    """
    points = 0
    problems = []
    for item in items:
        # length in UTF-8 bytes
        if len(item.short_description.strip().encode("utf-8")) % DESCRIPTION_LENGTH_FACTOR != 0:
            continue
        price, problem = parse_amount(item.price)
        if price is None:
            problems.append(f"{item.short_description.strip()!r}: {problem}")
            continue
        earned = int((price * DESCRIPTION_PRICE_MULTIPLIER).to_integral_value(rounding=ROUND_CEILING))
        points += max(earned, 0)
    return RuleOutcome(points, "; ".join(problems) or None)

def points_for_llm(total: str, generated_by_llm: bool) -> RuleOutcome:
    """5 points if the total is greater than 10.00 and this program was generated by an LLM."""
    if not generated_by_llm:
        return RuleOutcome(0)
    amount, problem = parse_amount(total)
    if amount is None:
        return RuleOutcome(0, problem)
    return RuleOutcome(POINTS_LLM_GENERATED if amount > LLM_TOTAL_THRESHOLD else 0)

def points_for_odd_day(purchase_date: str) -> RuleOutcome:
    """6 points if the day in the purchase date is odd."""
    problem = f"cannot parse purchase date {purchase_date!r}"
    if not _DATE_RE.fullmatch(purchase_date):
        return RuleOutcome(0, problem)
    try:
        parsed = datetime.strptime(purchase_date, DATE_FORMAT)
    except ValueError:
        return RuleOutcome(0, problem)
    return RuleOutcome(POINTS_ODD_DAY if parsed.day % 2 != 0 else 0)

def points_for_purchase_time(purchase_time: str) -> RuleOutcome:
    """10 points if the purchase hour is 14, 15 or 16."""
    hour_part = purchase_time.split(":")[0]
    if not _HOUR_RE.fullmatch(hour_part):
        return RuleOutcome(0, f"cannot parse purchase time {purchase_time!r}")
    hour = int(hour_part)
    return RuleOutcome(POINTS_TIME_WINDOW if WINDOW_START_HOUR <= hour <= WINDOW_END_HOUR else 0)
