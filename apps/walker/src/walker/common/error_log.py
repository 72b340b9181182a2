from __future__ import annotations

import logging
from dataclasses import dataclass

from walker.locomotion.state import LocomotionPhase, LocomotionStep

logger = logging.getLogger(__name__)


@dataclass
class FrameError:
    """A failure inside the frame loop, pinned to the locomotion state it happened in."""

    context: str
    message: str
    first_tick: int | None = None
    last_tick: int | None = None
    phase: LocomotionPhase | None = None
    level: float | None = None
    multiplier: float | None = None
    count: int = 1

    def where(self) -> str:
        parts: list[str] = []
        if self.first_tick is not None:
            if self.last_tick is not None and self.last_tick != self.first_tick:
                parts.append(f"ticks {self.first_tick}-{self.last_tick}")
            else:
                parts.append(f"tick {self.first_tick}")
        if self.phase is not None:
            parts.append(f"{self.phase.value} L{self.level:+.0f} m{self.multiplier:.3f}")
        return ", ".join(parts)

    def summary_line(self) -> str:
        where = self.where()
        line = f"{self.context} [{where}]: {self.message}" if where else f"{self.context}: {self.message}"
        if self.count > 1:
            line += f" (x{self.count})"
        return line


class ErrorLog:
    """
    Recent frame failures for the HUD.

    A broken callback fails every frame, so a failure repeating the previous one
    (same context and message) only extends its tick range and repeat count. The
    locomotion context kept is the one from the first failing frame.
    """

    def __init__(self, *, max_items: int = 30) -> None:
        self._max_items = max(1, int(max_items))
        self._items: list[FrameError] = []

    def items(self) -> list[FrameError]:
        return list(self._items)

    def last(self) -> FrameError | None:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def record(
        self,
        *,
        context: str,
        exc: BaseException,
        tick: int | None = None,
        step: LocomotionStep | None = None,
    ) -> FrameError:
        message = f"{type(exc).__name__}: {exc}".strip()
        last = self.last()
        if last is not None and (last.context, last.message) == (context, message):
            last.count += 1
            last.last_tick = tick
            logger.debug("%s repeated (x%d)", context, last.count)
            return last

        item = FrameError(context=context, message=message, first_tick=tick, last_tick=tick)
        if step is not None:
            item.phase = step.phase
            item.level = step.level
            item.multiplier = step.multiplier
        self._items.append(item)
        del self._items[: -self._max_items]
        logger.error("%s", item.summary_line(), exc_info=exc)
        return item
