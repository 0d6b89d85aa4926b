# Overview: Result-returning entry points used by the UI-facing layers.

"""
The services raise typed errors. Callers that prefer a value (the terminal
display, the POS, the CLI) use these wrappers instead: every call returns an
OperationResult whose `status` is "OK" or the error code, plus a message a
person can read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import SalonSyncError
from .services import checkout_service, clock_service, token_service


OK = "OK"


@dataclass
class OperationResult:
    ok: bool
    status: str
    message: str
    data: dict = field(default_factory=dict)
    http_status: int = 200

    @classmethod
    def success(cls, message: str, data: dict | None = None, http_status: int = 200) -> "OperationResult":
        return cls(ok=True, status=OK, message=message, data=data or {}, http_status=http_status)

    @classmethod
    def failure(cls, error: SalonSyncError) -> "OperationResult":
        return cls(
            ok=False,
            status=error.code,
            message=error.message,
            data=dict(error.details),
            http_status=error.http_status,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "status": self.status, "message": self.message, "data": self.data}


def issue_token() -> OperationResult:
    try:
        token = token_service.issue_token()
    except SalonSyncError as e:
        return OperationResult.failure(e)
    return OperationResult.success(
        "Terminal code issued",
        token_service.build_qr_payload(token),
        http_status=201,
    )


def toggle(staff_id: int) -> OperationResult:
    try:
        outcome = clock_service.toggle(staff_id)
    except SalonSyncError as e:
        return OperationResult.failure(e)
    return OperationResult.success(outcome.message, outcome.to_dict())


def scan(staff_id: int, token: str, signature: str | None = None) -> OperationResult:
    try:
        outcome = clock_service.scan(staff_id, token, signature)
    except SalonSyncError as e:
        return OperationResult.failure(e)
    return OperationResult.success(outcome.message, outcome.to_dict())


def commit_transaction(staff_id: int, cart_lines: list, payment_method: str) -> OperationResult:
    try:
        outcome = checkout_service.commit_transaction(staff_id, cart_lines, payment_method)
    except SalonSyncError as e:
        return OperationResult.failure(e)
    return OperationResult.success(outcome.message, outcome.to_dict(), http_status=201)
