# Overview: Service-layer operations for terminal clock tokens.

"""
Clock Token Store

WHY: The shared terminal shows a QR code that staff scan to clock in/out.
The token proves physical presence at the terminal, not identity. The display
re-issues a token periodically so a photo of the screen cannot be replayed.

RULES:
- Tokens live CLOCK_TOKEN_TTL_MINUTES (default 20) from issuance.
- Single-use: a successful validation deletes the row.
- Expired tokens are deleted whenever they are examined, and by the sweep.
- Consumption is one conditional DELETE, so two scans of the same code
  cannot both succeed.
- The QR payload carries an HMAC-SHA256 signature over token + expiry.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import timedelta

from flask import current_app

from ..extensions import db
from ..models import ClockToken
from ..errors import TokenNotFound, TokenExpired, InvalidSignature
from ..time_utils import utcnow, to_utc_z
from .concurrency import storage_guard


DEFAULT_TTL_MINUTES = 20


def _ttl() -> timedelta:
    minutes = current_app.config.get("CLOCK_TOKEN_TTL_MINUTES", DEFAULT_TTL_MINUTES)
    return timedelta(minutes=minutes)


def generate_token_value() -> str:
    """URL-safe random value; 24 bytes keeps the QR code small."""
    return secrets.token_urlsafe(24)


def issue_token() -> ClockToken:
    now = utcnow()
    token = ClockToken(
        token=generate_token_value(),
        created_at=now,
        expires_at=now + _ttl(),
    )
    with storage_guard("token issue"):
        db.session.add(token)
        db.session.commit()
    return token


def consume_token(token: str, *, now=None, commit: bool = True) -> None:
    """
    Validate and consume a token.

    Raises TokenNotFound if absent, TokenExpired if past its expiry (the
    stale row is deleted either way). With commit=False the delete joins the
    caller's transaction, so a later failure restores the token.
    """
    if not token:
        raise TokenNotFound()

    now = now or utcnow()

    with storage_guard("token consume"):
        consumed = db.session.query(ClockToken).filter(
            ClockToken.token == token,
            ClockToken.expires_at >= now,
        ).delete(synchronize_session=False)

        if consumed:
            if commit:
                db.session.commit()
            return

        expired = db.session.query(ClockToken).filter(
            ClockToken.token == token,
        ).delete(synchronize_session=False)
        db.session.commit()

    if expired:
        raise TokenExpired()
    raise TokenNotFound()


def validate_and_consume(token: str) -> bool:
    consume_token(token)
    return True


def sweep_expired_tokens() -> int:
    """Delete every token past its expiry. Returns the number removed."""
    with storage_guard("token sweep"):
        deleted = db.session.query(ClockToken).filter(
            ClockToken.expires_at < utcnow()
        ).delete(synchronize_session=False)
        db.session.commit()
    return deleted


def sign_token(token: str, expires_at) -> str:
    key = current_app.config["SECRET_KEY"].encode("utf-8")
    message = f"{token}|{to_utc_z(expires_at)}".encode("utf-8")
    return hmac.new(key, message, hashlib.sha256).hexdigest()


def build_qr_payload(token: ClockToken) -> dict:
    """What the terminal encodes into its QR image."""
    return {
        "token": token.token,
        "expires_at": to_utc_z(token.expires_at),
        "signature": sign_token(token.token, token.expires_at),
    }


def verify_signature(token: str, signature: str | None) -> None:
    """
    Check a scanned signature against the stored token.

    Unknown and expired tokens are reported as TokenNotFound / TokenExpired
    so the caller sees the same outcome as a plain consume; an expired row is
    deleted before the signature is looked at.
    """
    record = db.session.get(ClockToken, token) if token else None
    if record is None:
        raise TokenNotFound()
    if utcnow() > record.expires_at:
        consume_token(token)
    if not signature:
        raise InvalidSignature("Token signature is missing")
    expected = sign_token(record.token, record.expires_at)
    if not hmac.compare_digest(expected, signature):
        raise InvalidSignature()
