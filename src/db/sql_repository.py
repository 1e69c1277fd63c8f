"""Implementation of the MessageStore using SQLAlchemy"""

import logging
from collections import defaultdict
from typing import Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError, StoreWriteError
from src.db.repository import BlobListener, Unsubscribe
from src.db.schema import DBMessage

logger = logging.getLogger(__name__)


class SQLMessageStore:
    """
    Messages stored using SQL / methods implemented using SQLAlchemy.
    ----
    Listeners registered on this instance get every committed write pushed to them synchronously,
    which is how a client sees its own writes straight away.
    """

    def __init__(self, db_session: Session) -> None:
        self.db = db_session
        self._listeners: dict[str, list[BlobListener]] = defaultdict(list)

    def create_message(
        self, sender_id: str, text: str, chat_id: Optional[str] = None
    ) -> str:
        """Post a new message and return its ID."""
        new_id = str(uuid4())
        message = DBMessage(id=new_id, chat_id=chat_id, sender_id=sender_id, text=text)
        self.db.add(message)
        self.db.commit()
        return new_id

    def read_game_blob(self, message_id: str) -> str | None:
        try:
            message = self._fetch_message(message_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RepositoryError(f"Could not read message {message_id}: {exc}") from exc
        if message is None:
            return None
        return message.text

    def write_game_blob(self, message_id: str, text: str) -> None:
        """Replace the text of a message (last write wins)."""
        try:
            message = self._fetch_message(message_id)
            if message is None:
                raise StoreWriteError(f"Message with {message_id=} not found.")
            message.text = text
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreWriteError(f"Could not update message {message_id}: {exc}") from exc
        self._notify(message_id, text)

    def subscribe(self, message_id: str, listener: BlobListener) -> Unsubscribe:
        self._listeners[message_id].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(message_id)
            if listeners is None or listener not in listeners:
                return
            listeners.remove(listener)
            if not listeners:
                del self._listeners[message_id]

        return unsubscribe

    def _notify(self, message_id: str, text: str) -> None:
        """The write is already committed, a broken listener must not undo that for the caller."""
        for listener in list(self._listeners.get(message_id, [])):
            try:
                listener(text)
            except Exception:
                logger.exception("Listener on message %s failed.", message_id)

    def _fetch_message(self, message_id: str) -> DBMessage | None:
        query = select(DBMessage).where(DBMessage.id == message_id)
        return self.db.scalar(query)
