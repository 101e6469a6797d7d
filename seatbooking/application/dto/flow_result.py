from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

S = TypeVar("S")


@dataclass(frozen=True)
class FlowMessage:
    level: str  # "success", "error"
    text: str


@dataclass(frozen=True)
class FlowResult(Generic[S]):
    ok: bool
    state: S
    message: FlowMessage | None = None

    @staticmethod
    def success(state: S, text: str | None = None) -> "FlowResult[S]":
        return FlowResult(ok=True, state=state, message=FlowMessage("success", text) if text else None)

    @staticmethod
    def error(state: S, text: str) -> "FlowResult[S]":
        return FlowResult(ok=False, state=state, message=FlowMessage("error", text))
