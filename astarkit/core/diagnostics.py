from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Iterator, List, Optional


@dataclass
class Diagnostic:
    code: str
    message: str
    severity: str = "ERROR"
    location: Optional[str] = None
    hints: List[str] = field(default_factory=list)
    data: Optional[dict] = None

    @property
    def is_error(self) -> bool:
        return self.severity == "ERROR"

    def format(self) -> str:
        line = f"{self.severity} {self.code} at {self.location or '<root>'}: {self.message}"
        return "\n  hint: ".join([line, *self.hints])

    def to_dict(self) -> dict:
        return asdict(self)


class AstarError(Exception):
    def __init__(self, diagnostic: Diagnostic):
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return f"[{self.code}] {self.diagnostic.message}"


class RuleContractError(AstarError):
    """A rule was missing, unknown, or returned something the engine cannot use."""

    @classmethod
    def for_rule(cls, rule: str, code: str, message: str, **data: Any) -> "RuleContractError":
        return cls(Diagnostic(code=code, message=message, location=rule, data=data or None))


class CachingDisabledError(AstarError):
    @classmethod
    def for_operation(cls, operation: str) -> "CachingDisabledError":
        return cls(
            Diagnostic(
                code="E-CACHE-DISABLED",
                message=f"{operation}() called with caching off",
                location=operation,
                hints=["enable caching with set_caching(True) or engine.caching in config"],
            )
        )


class ConfigError(AstarError):
    pass


class Diagnostics:
    """Findings collected while checking a config, reported together."""

    def __init__(self, items: Optional[Iterable[Diagnostic]] = None) -> None:
        self.items: List[Diagnostic] = list(items or [])

    def add(self, diagnostic: Diagnostic) -> None:
        self.items.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self.items.extend(diagnostics)

    def errors(self) -> List[Diagnostic]:
        return [d for d in self.items if d.is_error]

    def has_errors(self) -> bool:
        return any(d.is_error for d in self.items)

    def raise_for_errors(self) -> None:
        errors = self.errors()
        if errors:
            raise ConfigError(errors[0])

    def format(self) -> List[str]:
        return [d.format() for d in self.items]

    def to_list(self) -> List[dict]:
        return [d.to_dict() for d in self.items]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
