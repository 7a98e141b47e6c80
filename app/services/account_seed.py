from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from loguru import logger
from sqlmodel import Session

from app.core.config import settings
from app.models.enums import UserRole
from app.services.auth_service import create_user, get_user_by_email


@dataclass(frozen=True)
class SeedAccount:
    email: str
    password: str
    username: str
    full_name: str | None = None
    bio: str | None = None
    role: UserRole = UserRole.USER


@dataclass(frozen=True)
class SeedSummary:
    created: int
    updated: int
    skipped: int


def default_accounts() -> list[SeedAccount]:
    return [
        SeedAccount(
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
            username='admin',
            full_name='Administrator',
            role=UserRole.ADMIN,
        ),
        SeedAccount(
            email=settings.DEMO_EMAIL,
            password=settings.DEMO_PASSWORD,
            username='testuser',
            full_name='Test User',
            bio='A test user for exploring StoryBoard',
        ),
    ]


def _parse_payload(raw: Any) -> list[SeedAccount]:
    if isinstance(raw, dict):
        items = raw.get('accounts', [])
    else:
        items = raw
    if not isinstance(items, list):
        raise ValueError('seed accounts must be a list or {accounts: []}')
    accounts: list[SeedAccount] = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError('each seed account must be an object')
        email = str(item.get('email', '')).strip()
        password = str(item.get('password', ''))
        username = str(item.get('username', '')).strip()
        if not email or not password or not username:
            raise ValueError('seed account requires email, password, and username')
        accounts.append(
            SeedAccount(
                email=email,
                password=password,
                username=username,
                full_name=item.get('full_name') or None,
                bio=item.get('bio') or None,
                role=UserRole(item.get('role') or UserRole.USER),
            )
        )
    return accounts


def load_accounts(path: Path) -> list[SeedAccount]:
    raw = path.read_text(encoding='utf-8')
    return _parse_payload(json.loads(raw))


def seed_accounts(session: Session, accounts: Iterable[SeedAccount]) -> SeedSummary:
    """Make sure every account exists with at least its seeded role.

    Existing accounts keep their password; only a missing admin role is
    granted.
    """
    created = 0
    updated = 0
    skipped = 0
    for account in accounts:
        existing = get_user_by_email(session, account.email)
        if not existing:
            record = create_user(
                session,
                account.email,
                account.password,
                username=account.username,
                full_name=account.full_name,
                role=account.role,
            )
            if account.bio:
                record.bio = account.bio
                session.add(record)
                session.commit()
            logger.info('seed.account_created', email=account.email, role=account.role.value)
            created += 1
            continue
        if account.role == UserRole.ADMIN and existing.role != UserRole.ADMIN:
            existing.role = UserRole.ADMIN
            session.add(existing)
            session.commit()
            updated += 1
            continue
        skipped += 1
    return SeedSummary(created=created, updated=updated, skipped=skipped)
