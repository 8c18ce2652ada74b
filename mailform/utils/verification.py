from dataclasses import dataclass

from ..exceptions.contact import ContactError


@dataclass(frozen=True)
class VerificationResult:
    success: bool
    reasons: tuple[str, ...] = ()
    error: ContactError | None = None

    @classmethod
    def passed(cls) -> "VerificationResult":
        return cls(success=True)

    @classmethod
    def failed(cls, error: ContactError, *reasons: str) -> "VerificationResult":
        return cls(success=False, reasons=reasons, error=error)
