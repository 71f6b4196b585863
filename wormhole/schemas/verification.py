"""
Check Results

Outcome records for the chain-side acceptance check. Each rule produces a
CheckResult; a VerificationResult is accepted only when every rule passed.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


CheckSeverity = Literal["info", "error"]


class CheckResult(BaseModel):
    """Outcome of one acceptance rule."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(..., min_length=1)
    ok: bool
    severity: CheckSeverity
    message: str
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return not self.ok and self.severity == "error"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=True, severity="info", message=message, details=details or {})

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=False, severity="error", message=message, details=details or {})


class VerificationResult(BaseModel):
    """All rule outcomes for one withdrawal transaction."""

    model_config = ConfigDict(extra="forbid")

    ok: bool
    checks: list[CheckResult] = Field(default_factory=list)

    @classmethod
    def from_checks(cls, checks: list[CheckResult]) -> "VerificationResult":
        return cls(ok=all(check.ok for check in checks), checks=checks)

    @property
    def error_count(self) -> int:
        return len(self.get_failed_checks())

    def get_check(self, check_id: str) -> Optional[CheckResult]:
        return next((c for c in self.checks if c.check_id == check_id), None)

    def get_failed_checks(self) -> list[CheckResult]:
        return [c for c in self.checks if c.is_error]

    def get_error_messages(self) -> list[str]:
        return [c.message for c in self.get_failed_checks()]
