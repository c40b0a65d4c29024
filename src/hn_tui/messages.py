from textual.message import Message

from .events import Event


class StateEvent(Message):
    """Carries an event into the App's queue, from a key press or a fetch thread."""

    def __init__(self, event: Event) -> None:
        self.event = event
        super().__init__()
