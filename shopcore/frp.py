from dataclasses import dataclass
from datetime import datetime
from functools import reduce
from typing import Callable, Tuple
import uuid

from .domain import Event, Notification
from .ftypes import Result

NOTIFY_SUCCESS = "NOTIFY_SUCCESS"
NOTIFY_ERROR = "NOTIFY_ERROR"
NOTIFY_WARNING = "NOTIFY_WARNING"
DISMISS = "DISMISS"


@dataclass(frozen=True)
class EventBus:
    """
    Иммутабельная шина событий уведомлений.
    Подписчики - чистые функции: (Event, State) -> State
    """

    subscribers: Tuple[Tuple[str, Callable], ...] = ()

    def subscribe(
        self, event_name: str, handler: Callable[[Event, dict], dict]
    ) -> "EventBus":
        """Возвращает новую шину с добавленным подписчиком"""
        return EventBus(subscribers=self.subscribers + ((event_name, handler),))

    def publish(self, event: Event, state: dict) -> dict:
        """Применяет все подписчики события по очереди (fold), возвращает новое состояние"""
        matching_handlers = tuple(
            handler for name, handler in self.subscribers if name == event.name
        )
        return reduce(lambda s, handler: handler(event, s), matching_handlers, state)


# ============ Конструкторы событий ============


def create_event(name: str, payload: dict) -> Event:
    """Создаёт событие с автоматической меткой времени"""
    return Event(
        id=str(uuid.uuid4()),
        ts=datetime.now().isoformat(),
        name=name,
        payload=payload,
    )


def result_to_event(result: Result, success_message: str = "") -> Event:
    """
    Сопоставляет результат ядра с приёмником уведомлений (onSuccess / onError).
    Если success_message не передан, берётся message самого результата
    """
    if result.is_ok:
        return create_event(
            NOTIFY_SUCCESS, {"message": success_message or result.message or ""}
        )
    return create_event(NOTIFY_ERROR, {"message": result.message or ""})


# ============ Чистые обработчики ============


def _push(kind: str) -> Callable[[Event, dict], dict]:
    def handler(event: Event, state: dict) -> dict:
        notification = Notification(
            id=event.id, message=event.payload.get("message", ""), type=kind
        )
        return {
            **state,
            "notifications": state.get("notifications", ()) + (notification,),
            "last_event": event.name,
        }

    return handler


handle_success = _push("success")
handle_error = _push("error")
handle_warning = _push("warning")


def handle_dismiss(event: Event, state: dict) -> dict:
    """Удаляет уведомление по id"""
    notification_id = event.payload.get("notification_id")
    return {
        **state,
        "notifications": tuple(
            n for n in state.get("notifications", ()) if n.id != notification_id
        ),
        "last_event": event.name,
    }


# ============ Вспомогательные функции ============


def create_notification_bus() -> EventBus:
    bus = EventBus()
    bus = bus.subscribe(NOTIFY_SUCCESS, handle_success)
    bus = bus.subscribe(NOTIFY_ERROR, handle_error)
    bus = bus.subscribe(NOTIFY_WARNING, handle_warning)
    bus = bus.subscribe(DISMISS, handle_dismiss)
    return bus


def initial_state() -> dict:
    return {"notifications": (), "last_event": None}


def apply_events(bus: EventBus, events: Tuple[Event, ...], state: dict) -> dict:
    """Чистая функция: (events, initial_state) -> final_state"""
    return reduce(lambda s, e: bus.publish(e, s), events, state)
