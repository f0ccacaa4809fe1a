from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .board import INNER_ARROWS, OUTER_ARROWS, is_safe_square
from .types import ArrowKind, Color


@dataclass(frozen=True, slots=True)
class ArrowEffect:
    kind: ArrowKind
    tail: int
    head: int


def resolve_arrow(position: int, color: Color) -> Optional[ArrowEffect]:
    """Glide triggered by landing exactly on ``position``, outer arrows first."""
    head = OUTER_ARROWS.get(position)
    if head is not None:
        return ArrowEffect(ArrowKind.OUTER, position, head)
    inner = INNER_ARROWS.get(position)
    if inner is not None and inner[1] == color:
        return ArrowEffect(ArrowKind.INNER, position, inner[0])
    return None


def glide_target(position: int, color: Color) -> int:
    arrow = resolve_arrow(position, color)
    return arrow.head if arrow else position


def head_allows_capture(head: int) -> bool:
    return not is_safe_square(head)
