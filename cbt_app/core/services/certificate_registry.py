"""Service for issuing and verifying certificates for passed tests."""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from uuid import uuid4

from cbt_app.core.models import Certificate, TestResult


class CertificateRegistry:
    """Issues one certificate per passed session and tracks its validity."""

    def __init__(self) -> None:
        self._certificates: dict[str, Certificate] = {}
        self._by_session: dict[str, str] = {}
        self._counters: dict[int, int] = {}
        self._lock = Lock()

    def issue(self, result: TestResult, survey_id: str, holder_id: str) -> Certificate:
        if not result.passed:
            raise ValueError("Certificates are only issued for passed results.")
        with self._lock:
            existing = self._by_session.get(result.session_id)
            if existing is not None:
                return self._certificates[existing]

            issued_at = datetime.now(timezone.utc)
            number = self._next_number(issued_at.year)
            certificate = Certificate(
                certificate_number=number,
                session_id=result.session_id,
                survey_id=survey_id,
                holder_id=holder_id,
                percentage=result.percentage,
                issued_at=issued_at,
                verification_token=uuid4().hex,
            )
            self._certificates[number] = certificate
            self._by_session[result.session_id] = number
            return certificate

    def verify(self, certificate_number: str, verification_token: str) -> bool:
        with self._lock:
            certificate = self._certificates.get(certificate_number)
            if certificate is None:
                return False
            return certificate.is_valid and certificate.verification_token == verification_token

    def revoke(self, certificate_number: str) -> Certificate:
        with self._lock:
            certificate = self._certificates.get(certificate_number)
            if certificate is None:
                raise KeyError(f"Unknown certificate {certificate_number!r}")
            certificate.is_valid = False
            return certificate

    def for_holder(self, holder_id: str) -> list[Certificate]:
        with self._lock:
            return sorted(
                (c for c in self._certificates.values() if c.holder_id == holder_id),
                key=lambda c: c.issued_at,
            )

    def _next_number(self, year: int) -> str:
        self._counters[year] = self._counters.get(year, 0) + 1
        return f"CERT-{year}-{self._counters[year]:03d}"
