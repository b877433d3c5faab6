# Overview: Service-layer operations for per-user pay settings.

from __future__ import annotations

from dataclasses import replace

from ..domain import AppSettings
from ..repositories import FinancialRepository, get_repository
from ..validation import (
    PayloadPolicy,
    ValidationError,
    coerce_number,
    coerce_text,
    enforce_non_negative,
    validate_payload,
)
from .rate_service import reapply_rates


SETTINGS_POLICY = PayloadPolicy(
    fields={
        "hourly_rate": coerce_number,
        "overtime_rate": coerce_number,
        "daily_limit": coerce_number,
        "currency": coerce_text,
        "user_name": coerce_text,
        "expense_fund": coerce_number,
    },
)


def get_settings(*, user_id: int, repo: FinancialRepository | None = None) -> AppSettings:
    repo = repo if repo is not None else get_repository()
    return repo.get_settings(user_id)


def update_settings(*, user_id: int, changes: dict, repo: FinancialRepository | None = None) -> AppSettings:
    """
    Apply a partial settings change.

    A change to either rate re-prices every stored time entry of the user
    (all periods). Changing only daily_limit does not: it applies to entries
    created afterwards.
    """
    repo = repo if repo is not None else get_repository()
    patch = validate_payload(payload=changes, policy=SETTINGS_POLICY, partial=True)

    enforce_non_negative(patch, "hourly_rate", "overtime_rate", "expense_fund")
    if "daily_limit" in patch and patch["daily_limit"] <= 0:
        raise ValidationError("daily_limit must be > 0")
    if "currency" in patch:
        currency = patch["currency"].upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ValidationError("currency must be a 3-letter code")
        patch["currency"] = currency
    if "user_name" in patch and not patch["user_name"]:
        raise ValidationError("user_name cannot be empty")

    current = repo.get_settings(user_id)
    updated = replace(current, **patch)

    rates_changed = (
        updated.hourly_rate != current.hourly_rate
        or updated.overtime_rate != current.overtime_rate
    )
    if rates_changed:
        entries = repo.get_time_entries(user_id)
        if entries:
            repriced = reapply_rates(
                entries,
                updated.hourly_rate,
                updated.overtime_rate,
                updated.daily_limit,
            )
            # Settings are saved only after the re-priced entries
            repo.save_time_entries(repriced, user_id)

    repo.save_settings(updated)
    return updated


def sync_user_name(user, repo: FinancialRepository | None = None) -> AppSettings:
    """Keep the settings display name equal to the account name."""
    repo = repo if repo is not None else get_repository()
    settings = repo.get_settings(user.id)
    if settings.user_name != user.name:
        settings = replace(settings, user_name=user.name)
        repo.save_settings(settings)
    return settings
