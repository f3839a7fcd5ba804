"""
Amount Coercion

Amounts may reach us as Decimal, int, float or text (form input,
JSON files edited by hand, spreadsheet cells). Every sum and every
amount sort in the app goes through coerce_amount() so that one corrupt
record contributes 0 instead of raising.

DESIGN DECISION: Arithmetic is done in Decimal. Floats are converted
through str() so 0.1 stays 0.1 rather than its binary expansion.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

import structlog

from smartspend.models.errors import CorruptRecordError


ZERO = Decimal("0")
CENTS = Decimal("0.01")

logger = structlog.get_logger(__name__)


def parse_amount(value: object) -> Decimal:
    """
    Parse a value into a finite Decimal.
    
    Raises:
        CorruptRecordError: For None, booleans, non-numeric text, NaN or Infinity
    """
    if isinstance(value, bool) or value is None:
        raise CorruptRecordError(value)
    
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise CorruptRecordError(value)
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            raise CorruptRecordError(value)
    else:
        raise CorruptRecordError(value)
    
    if not parsed.is_finite():
        raise CorruptRecordError(value)
    return parsed


def coerce_amount(value: object) -> Decimal:
    """
    Total version of parse_amount(): anything unparseable becomes 0.
    
    Used at every aggregation site. Never raises.
    """
    try:
        return parse_amount(value)
    except CorruptRecordError:
        logger.warning("corrupt_amount", value=repr(value))
        return ZERO


def round_cents(value: object) -> Decimal:
    """
    Round to two decimal places, half up.
    
    Precision is widened to fit the value, so amounts beyond the default
    28 significant digits round instead of raising InvalidOperation.
    """
    amount = coerce_amount(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(value: object) -> str:
    """Format an amount with exactly two decimal places."""
    return str(round_cents(value))
