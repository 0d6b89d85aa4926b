from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text

from .errors import ValidationError
from .models import SERVICE_CATEGORIES, STAFF_ROLES


# Largest menu price accepted (whole currency units)
MAX_PRICE = 99_999_999
MAX_STOCK = 1_000_000
# Largest quantity on one cart line
MAX_QUANTITY = 10_000
# Largest value an INTEGER column holds
MAX_STORED_INT = 2**63 - 1


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


STAFF_POLICY = ModelValidationPolicy(
    writable_fields={"name", "role", "job_title"},
    required_on_create={"name", "role"},
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "price", "category", "sub_category", "is_retail", "stock_level", "min_reorder_point"},
    required_on_create={"name", "price", "category"},
)


def _columns_by_key(model) -> dict[str, Any]:
    return {c.key: c for c in model.__mapper__.columns}


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers: reject floats, bools and scientific notation
    if isinstance(coltype, Integer):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped or 'e' in stripped.lower() or '.' in stripped:
                raise ValidationError(f"{col.key} must be a plain integer")
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{col.key} must be an integer")
        raise ValidationError(f"{col.key} must be an integer")

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
            return value.strip().lower() == "true"
        raise ValidationError(f"{col.key} must be a boolean")

    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    return value


def validate_payload(
    *,
    model,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against column metadata and the
    policy allowlist. Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    for k in payload.keys():
        if k not in policy.writable_fields or k not in cols:
            raise ValidationError(f"Field not allowed: {k}")

    patch: dict = {}
    for k, raw in payload.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        if isinstance(col.type, (String, Text)) and not col.nullable and val == "" and k in required:
            raise ValidationError(f"{k} cannot be blank")

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def enforce_rules_staff(patch: dict) -> None:
    if "role" in patch and patch["role"] not in STAFF_ROLES:
        raise ValidationError(f"role must be one of {', '.join(STAFF_ROLES)}")


def enforce_rules_product(merged: dict) -> None:
    """
    Rules over the full product state (existing values overlaid with the patch).

    The retail stock fields exist iff is_retail; non-retail items have them
    cleared rather than rejected so a catalog edit can flip the flag.
    """
    price = merged.get("price")
    if price is not None:
        if price < 0:
            raise ValidationError("price must be >= 0")
        if price > MAX_PRICE:
            raise ValidationError(f"price cannot exceed {MAX_PRICE}")

    category = merged.get("category")
    if category is not None and category not in SERVICE_CATEGORIES:
        raise ValidationError(f"category must be one of {', '.join(SERVICE_CATEGORIES)}")

    if merged.get("is_retail"):
        for field in ("stock_level", "min_reorder_point"):
            value = merged.get(field)
            if value is None:
                raise ValidationError(f"{field} is required for retail products")
            if value < 0 or value > MAX_STOCK:
                raise ValidationError(f"{field} must be between 0 and {MAX_STOCK}")
    else:
        merged["stock_level"] = None
        merged["min_reorder_point"] = None
