from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OutcomeKind(Enum):
    SUCCESS = "success"
    CHECK_FAILED = "check failed"
    BUILD_FAILED = "release build failed"
    DOC_COMPILE_FAILED = "doc examples failed to compile"
    TOOLING_ERROR = "tooling error"


@dataclass(frozen=True)
class VerificationOutcome:
    kind: OutcomeKind
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    def describe(self) -> str:
        return self.kind.value if not self.detail else f"{self.kind.value}: {self.detail}"


SUCCESS = VerificationOutcome(OutcomeKind.SUCCESS)
