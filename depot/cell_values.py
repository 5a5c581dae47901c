"""
Cell Value Module

Turns one raw report cell into a non-negative stock quantity.
Handles blanks, dash markers, noisy numeric text, and the addition /
subtraction chains depot clerks type into cells (e.g. "=400-240-40+200").
"""

import logging
import math
import re
from numbers import Number
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)


BLANK_MARKERS = {"", "-", "N/A"}
EXPRESSION_MARKER = "="

_EXPRESSION_NOISE = re.compile(r"[^0-9.+\-\s]")
_CHAIN_TOKEN = re.compile(r"\s*([+-])?\s*(\d+(?:\.\d+)?)\s*")
_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_NUMERIC_NOISE = re.compile(r"[^\d.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


# ═══════════════════════════════════════════════════════════════
# EXPRESSION EVALUATION
# ═══════════════════════════════════════════════════════════════

def _evaluate_chain(body: str) -> Optional[float]:
    """
    Evaluate a strict chain of numbers joined by + or -.

    Each number takes the sign of the operator written in front of it.
    Returns None on anything that is not such a chain.
    """
    cleaned = _EXPRESSION_NOISE.sub("", body)
    total = None
    pos = 0

    while pos < len(cleaned):
        match = _CHAIN_TOKEN.match(cleaned, pos)
        if not match:
            return None
        operator, number = match.groups()
        value = float(number)

        if total is None:
            total = -value if operator == "-" else value
        elif operator is None:
            # Two numbers with nothing between them
            return None
        elif operator == "+":
            total += value
        else:
            total -= value
        pos = match.end()

    return total


def _accumulate_numbers(body: str) -> Optional[float]:
    """
    Walk every number in encounter order, applying the last operator
    seen between it and the previous number. Unrecognized text is skipped.
    """
    matches = list(_NUMBER.finditer(body))
    if not matches:
        return None

    total = float(matches[0].group())
    previous_end = matches[0].end()

    for match in matches[1:]:
        gap = body[previous_end:match.start()]
        operators = [ch for ch in gap if ch in "+-"]
        if operators and operators[-1] == "-":
            total -= float(match.group())
        else:
            total += float(match.group())
        previous_end = match.end()

    return total


def _first_number(body: str) -> Optional[float]:
    match = _NUMBER.search(body)
    if not match:
        return None
    return float(match.group())


# Tried in order, first non-None result wins
EXPRESSION_EVALUATORS: List[Callable[[str], Optional[float]]] = [
    _evaluate_chain,
    _accumulate_numbers,
    _first_number,
]


def round_quantity(value: float) -> int:
    """Round half up, as spreadsheets do."""
    return int(math.floor(value + 0.5))


def evaluate_expression(expression: str) -> Optional[int]:
    """
    Evaluate an expression cell such as "=400-240-40+200".

    Only non-negative numbers joined by + and - are understood; there is no
    operator precedence, no parentheses and no cell references. When the
    text is not a clean chain, the numbers found in it are accumulated
    best-effort, and as a last resort the first number is used as-is.

    Returns:
        Non-negative integer, or None if the text holds no number at all.
    """
    body = expression.strip()
    if body.startswith(EXPRESSION_MARKER):
        body = body[len(EXPRESSION_MARKER):]

    for position, evaluator in enumerate(EXPRESSION_EVALUATORS):
        try:
            result = evaluator(body)
        except (ValueError, OverflowError) as e:
            logger.debug("Evaluator %s failed on %r: %s", evaluator.__name__, expression, e)
            continue

        if result is None or not math.isfinite(result):
            if position == 0:
                logger.warning("Could not evaluate expression %r as a +/- chain", expression)
            continue

        return round_quantity(max(0.0, result))

    return None


# ═══════════════════════════════════════════════════════════════
# CELL RESOLUTION
# ═══════════════════════════════════════════════════════════════

def parse_numeric_text(text: str) -> Optional[float]:
    """
    Parse text like "1,250", "৳ 300" or "85 pcs" as a number.

    Everything except digits, dots and minus signs is dropped first, then
    the leading number is read.
    """
    cleaned = _NUMERIC_NOISE.sub("", text)
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None
    return float(match.group())


def _resolve(value) -> float:
    if value is None:
        return 0

    if isinstance(value, bool):
        return 0

    if isinstance(value, Number):
        number = float(value)
        if not math.isfinite(number):
            return 0
        return max(0, value)

    if isinstance(value, str):
        text = value.strip()

        if text in BLANK_MARKERS:
            return 0

        if text.startswith(EXPRESSION_MARKER):
            result = evaluate_expression(text)
            if result is not None:
                return result

        parsed = parse_numeric_text(text)
        if parsed is not None and math.isfinite(parsed):
            return max(0, parsed)

    return 0


def resolve_stock_value(value, location: str = "", row_index: Optional[int] = None,
                        product_name: str = "") -> float:
    """
    Interpret a single cell as a stock quantity.

    Args:
        value: Raw cell value (None, number, or text).
        location, row_index, product_name: Context, used for log messages only.

    Returns:
        A number >= 0. Never raises.
    """
    try:
        return _resolve(value)
    except Exception as e:
        logger.warning(
            "Unparseable stock value %r for %s at %s (row %s): %s",
            value, product_name or "?", location or "?", row_index, e
        )
        return 0
