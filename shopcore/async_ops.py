import asyncio
import logging
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)


# ============ Отменяемые таймеры по слотам ============


class TimerSlots:
    """
    Именованные слоты отложенных вызовов.
    Новый таймер в слоте отменяет предыдущий (debounce, автоскрытие тостов)
    """

    def __init__(self):
        self._tasks: Dict[Hashable, asyncio.Task] = {}

    def schedule(
        self, slot: Hashable, delay_s: float, callback: Callable[[], Any]
    ) -> asyncio.Task:
        self.cancel(slot)

        async def fire() -> None:
            await asyncio.sleep(delay_s)
            # снимаем себя до вызова: callback может перепланировать слот
            if self._tasks.get(slot) is asyncio.current_task():
                del self._tasks[slot]
            callback()

        task = asyncio.get_running_loop().create_task(fire())
        self._tasks[slot] = task
        return task

    def cancel(self, slot: Hashable) -> bool:
        task = self._tasks.pop(slot, None)
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        for slot in list(self._tasks):
            self.cancel(slot)

    def pending(self, slot: Hashable) -> bool:
        task = self._tasks.get(slot)
        return task is not None and not task.done()


# ============ Debounce поискового ввода ============


class Debouncer:
    """Доставляет только последнее значение, после которого прошло delay_s тишины"""

    SLOT = "debounce"

    def __init__(
        self,
        delay_s: float,
        callback: Callable[[Any], Any],
        slots: Optional[TimerSlots] = None,
    ):
        self.delay_s = delay_s
        self.callback = callback
        self.slots = slots or TimerSlots()

    def push(self, value: Any) -> None:
        self.slots.schedule(self.SLOT, self.delay_s, lambda: self.callback(value))

    def cancel(self) -> None:
        self.slots.cancel(self.SLOT)

    @property
    def pending(self) -> bool:
        return self.slots.pending(self.SLOT)


# ============ Автоскрытие уведомлений ============


def schedule_dismiss(
    slots: TimerSlots,
    notification_id: str,
    ttl_s: float,
    dismiss: Callable[[str], Any],
) -> asyncio.Task:
    """Через ttl_s вызывает dismiss(notification_id); слот = id уведомления"""
    logger.debug("Dismiss of %s scheduled in %.2fs", notification_id, ttl_s)
    return slots.schedule(
        ("notification", notification_id), ttl_s, lambda: dismiss(notification_id)
    )


async def debounce_values(values, delay_s: float) -> list:
    """
    Прогоняет последовательность (пауза_до_значения, значение) через Debouncer
    и возвращает то, что дошло до получателя. Удобно для сценариев поиска
    """
    delivered: list = []
    debouncer = Debouncer(delay_s, delivered.append)
    for pause_s, value in values:
        await asyncio.sleep(pause_s)
        debouncer.push(value)
    await asyncio.sleep(delay_s * 2)
    return delivered
