from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.entities.actions import Action
from app.domain.entities.session import Session


@dataclass(frozen=True)
class FlowResult:
    """Next session state plus the ordered side effects that lead to it."""

    session: Session
    actions: list[Action] = field(default_factory=list)
