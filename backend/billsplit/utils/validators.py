"""Request validators."""
import math
from bson import ObjectId, errors


def require_keys(payload, *keys):
    missing = [k for k in keys if k not in (payload or {})]
    if missing:
        raise ValueError(f"missing keys: {missing}")
    return True


def safe_object_id(value):
    try:
        return ObjectId(value)
    except (errors.InvalidId, TypeError):
        return None


def to_amount(value):
    """Coerce a currency amount to a finite float, or None if it can't be."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(amount):
        return None
    return amount
