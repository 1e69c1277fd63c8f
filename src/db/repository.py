"""Protocol for the host's message store: the only thing the game needs from the chat backend."""

from typing import Callable, Protocol

# Called with the new text of a message every time it is replaced
BlobListener = Callable[[str], None]
Unsubscribe = Callable[[], None]


class MessageStore(Protocol):
    """Keyed text values with pull (read), whole-value replace (write) and push (subscribe). No transactions."""

    def read_game_blob(self, message_id: str) -> str | None:
        """Last known text of the message, None if there is no such message. Raises RepositoryError when the store cannot be reached."""
        ...

    def write_game_blob(self, message_id: str, text: str) -> None:
        """Replace the text. Fire-and-forget: raises StoreWriteError on failure, nothing to acknowledge on success."""
        ...

    def subscribe(self, message_id: str, listener: BlobListener) -> Unsubscribe:
        """Push every new text of the message to the listener, until the returned callable is called."""
        ...
