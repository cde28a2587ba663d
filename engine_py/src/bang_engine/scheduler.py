"""
Deadline scheduler.

One recurring sweep applies turn and response timeouts for every room. A
failure in one room is logged and never stops the sweep for the others.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional, Tuple

from .engine import ActionResult, tick_room
from .repository import RoomRepository

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[str, ActionResult], Awaitable[None]]


def tick(repository: RoomRepository, now: Optional[float] = None) -> List[Tuple[str, ActionResult]]:
    """Run one sweep and return the rooms whose state moved on."""
    now = time.time() if now is None else now
    updates = []
    for room in repository.all():
        if room.started and room.is_abandoned():
            logger.info(f"Room {room.code}: no players connected, closing")
            repository.remove(room.code)
            continue
        try:
            result = tick_room(room, now)
        except Exception:
            logger.exception(f"Room {room.code}: scheduler tick failed")
            continue
        if result is None:
            continue
        if not result.success:
            logger.error(f"Room {room.code}: timeout could not be applied: {result.error_message}")
            continue
        repository.save(result.state)
        updates.append((room.code, result))
    return updates


async def run_scheduler(repository: RoomRepository, on_update: UpdateCallback,
                        interval: float = 0.5):
    """Sweep forever, handing every state change to on_update."""
    logger.info(f"Scheduler started, interval {interval}s")
    while True:
        for code, result in tick(repository):
            try:
                await on_update(code, result)
            except Exception:
                logger.exception(f"Room {code}: failed to publish timeout update")
        await asyncio.sleep(interval)
