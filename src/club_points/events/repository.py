from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Event


class EventRepository(Protocol):
    def load_events(self) -> Sequence[Event]:
        raise NotImplementedError

    def get_by_id(self, event_id: str) -> Optional[Event]:
        raise NotImplementedError

    def save_event(self, event: Event) -> Event:
        """Persist the event together with its full participant list.

        An id is assigned only when ``event.event_id`` is None.
        """

        raise NotImplementedError

    def delete_event(self, event_id: str) -> bool:
        raise NotImplementedError
