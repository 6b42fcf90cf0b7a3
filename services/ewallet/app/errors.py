from __future__ import annotations

from pydantic import ValidationError


class ChangesetError(ValueError):
    """Invalid insert/update parameters, keyed by field name."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__("; ".join(f"{field} {', '.join(msgs)}" for field, msgs in errors.items()))

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> ChangesetError:
        errors: dict[str, list[str]] = {}
        for err in exc.errors():
            field = ".".join(str(p) for p in err["loc"]) or "params"
            errors.setdefault(field, []).append(err["msg"])
        return cls(errors)


class GateError(RuntimeError):
    def __init__(self, code: str, description: str):
        self.code = code
        self.description = description
        super().__init__(f"{code}: {description}")


class ApiError(Exception):
    """Request-level failure rendered as an error envelope."""

    def __init__(self, code: str, description: str, messages: dict[str, list[str]] | None = None):
        self.code = code
        self.description = description
        self.messages = messages
        super().__init__(f"{code}: {description}")
