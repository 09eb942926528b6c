"""Vault health report: weak, reused, old and no-2FA entries."""
from collections import defaultdict
from datetime import datetime, timezone
from typing import Iterable, Literal, Optional

from pydantic import BaseModel
from zxcvbn import zxcvbn

from . import data
from .data import VaultEntry
from .vault.config import VaultConfig

IssueType = Literal["weak", "reused", "old", "no-2fa"]

MAX_PASSWORD_AGE_DAYS = 180
MIN_PASSWORD_SCORE = 3

_DAY_MS = 24 * 60 * 60 * 1000


class PasswordIssue(BaseModel):
    entry_id: str
    type: IssueType
    detail: Optional[str] = None


class HealthSummary(BaseModel):
    weak: int = 0
    reused: int = 0
    old: int = 0
    no2fa: int = 0


class VaultHealthReport(BaseModel):
    issues: list[PasswordIssue]
    summary: HealthSummary


def password_score(password: str) -> int:
    """zxcvbn strength score from 0 (trivial) to 4 (strong)."""
    if not password:
        return 0
    return zxcvbn(password)["score"]


def analyse_vault(
    entries: Iterable[VaultEntry],
    now_ms: Optional[int] = None,
    max_age_days: int = MAX_PASSWORD_AGE_DAYS,
    min_score: int = MIN_PASSWORD_SCORE,
    config: Optional[VaultConfig] = None,
) -> VaultHealthReport:
    """Build a health report for ``entries``.

    Args:
        entries: Vault entries to inspect.
        now_ms: Reference time in milliseconds (defaults to now).
        max_age_days: Entries older than this are reported as ``old``.
        min_score: Passwords scoring below this are reported as ``weak``.
        config: When given, its thresholds override the two above.
    """
    entries = list(entries)
    if config is not None:
        max_age_days = config.max_password_age_days
        min_score = config.min_password_score
    now = now_ms if now_ms is not None else data.now_ms()
    issues: list[PasswordIssue] = []

    for entry in entries:
        score = password_score(entry.password)
        if score < min_score:
            issues.append(PasswordIssue(
                entry_id=entry.id, type="weak", detail=f"Strength score {score}/4",
            ))

    by_password: dict[str, list[VaultEntry]] = defaultdict(list)
    for entry in entries:
        by_password[entry.password].append(entry)
    for group in by_password.values():
        if len(group) > 1:
            for entry in group:
                issues.append(PasswordIssue(
                    entry_id=entry.id, type="reused", detail=f"Reused {len(group)} times",
                ))

    max_age_ms = max_age_days * _DAY_MS
    for entry in entries:
        if now - entry.updated_at > max_age_ms:
            updated = datetime.fromtimestamp(entry.updated_at / 1000, tz=timezone.utc)
            issues.append(PasswordIssue(
                entry_id=entry.id,
                type="old",
                detail=(
                    f"Last updated on {updated.date().isoformat()} "
                    f"(over {max_age_days} days ago)"
                ),
            ))

    for entry in entries:
        if not entry.totp_secret:
            issues.append(PasswordIssue(entry_id=entry.id, type="no-2fa"))

    summary = HealthSummary()
    for issue in issues:
        field = "no2fa" if issue.type == "no-2fa" else issue.type
        setattr(summary, field, getattr(summary, field) + 1)
    return VaultHealthReport(issues=issues, summary=summary)
