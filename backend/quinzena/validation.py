from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable

from .services.time_calculator import parse_clock


# Maximum single amount: 9,999,999.99
MAX_AMOUNT = 9_999_999.99


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., a second entry for the same date)."""


def coerce_text(key: str, value: Any) -> str:
    return str(value).strip()


def coerce_optional_text(key: str, value: Any) -> str | None:
    text = str(value).strip()
    return text or None


def coerce_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "sim"):
            return True
        if lowered in ("false", "0", "no", "nao", "não", ""):
            return False
    raise ValidationError(f"{key} must be a boolean")


def coerce_number(key: str, value: Any) -> float:
    # bool is a subclass of int; reject it explicitly
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        stripped = value.strip().replace(",", ".")
        if not stripped:
            raise ValidationError(f"{key} must be a number")
        try:
            number = float(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be a number")
    else:
        raise ValidationError(f"{key} must be a number")
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{key} must be a finite number")
    if abs(number) > MAX_AMOUNT:
        raise ValidationError(f"{key} cannot exceed {MAX_AMOUNT:,.2f}")
    return number


def coerce_iso_date(key: str, value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"{key} must be a date (YYYY-MM-DD)")
    # Normalize so lexicographic period comparison stays valid
    return parsed.isoformat()


def coerce_clock(key: str, value: Any) -> str | None:
    text = str(value).strip()
    if not text:
        return None
    try:
        minutes = parse_clock(text)
    except ValueError:
        raise ValidationError(f"{key} must be a time (HH:MM)")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


@dataclass(frozen=True)
class PayloadPolicy:
    """
    Central policy layer:
    - fields: writable field name -> coercer (security boundary)
    - required_on_create: fields required for POST
    - nullable: fields that may be explicitly set to null
    """
    fields: dict[str, Callable[[str, Any], Any]]
    required_on_create: set[str] = field(default_factory=set)
    nullable: set[str] = field(default_factory=set)


def validate_payload(*, payload: dict | None, policy: PayloadPolicy, partial: bool) -> dict:
    """
    Validates + normalizes incoming JSON against a policy.
    Returns a cleaned dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(
            f for f in policy.required_on_create
            if payload.get(f) is None or (isinstance(payload.get(f), str) and not payload[f].strip())
        )
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    for k in payload.keys():
        if k not in policy.fields:
            raise ValidationError(f"Field not allowed: {k}")

    cleaned: dict = {}
    for k, raw in payload.items():
        if raw is None:
            if k not in policy.nullable:
                raise ValidationError(f"{k} cannot be null")
            cleaned[k] = None
            continue
        cleaned[k] = policy.fields[k](k, raw)

    return cleaned


def enforce_positive_amount(patch: dict, key: str = "amount") -> None:
    if key in patch and (patch[key] is None or patch[key] <= 0):
        raise ValidationError(f"{key} must be > 0")


def enforce_non_negative(patch: dict, *keys: str) -> None:
    for key in keys:
        if key in patch and patch[key] is not None and patch[key] < 0:
            raise ValidationError(f"{key} must be >= 0")
