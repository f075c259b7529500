"""
Conversation log service: per-broker conversations and their turns.
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple

from ..exceptions import NotFoundError
from ..models.records import Broker, Conversation, Message, Direction

logger = logging.getLogger(__name__)


class ConversationService:
    """
    Service for the conversation log.

    One conversation per broker, created lazily on the first query.
    append_turn is the only operation that changes a conversation's
    message_count, and it adds exactly one per call.

    Maintains data in memory. For production, this should be replaced
    with a database.
    """

    def __init__(self):
        self._conversations: Dict[str, Conversation] = {}
        self._by_broker: Dict[str, str] = {}
        self._messages: List[Message] = []
        self._lock = threading.RLock()

    def get_or_create_conversation(self, broker: Broker) -> Conversation:
        """
        Get the broker's conversation or start a new one.

        An existing conversation has its last activity refreshed.

        Args:
            broker: The broker sending the query

        Returns:
            Conversation object
        """
        with self._lock:
            conversation_id = self._by_broker.get(broker.id)
            if conversation_id:
                conversation = self._conversations[conversation_id]
                conversation.touch()
                return conversation

            conversation = Conversation(broker_id=broker.id, phone_number=broker.phone_number)
            self._conversations[conversation.id] = conversation
            self._by_broker[broker.id] = conversation.id
            logger.info(f"Started conversation {conversation.id} for broker {broker.id}")
            return conversation

    def append_turn(
        self,
        conversation_id: str,
        broker_id: str,
        direction: Direction,
        content: str,
        intent: Optional[str] = None,
        confidence: Optional[float] = None,
        unit_id: Optional[str] = None
    ) -> Message:
        """
        Append one turn to a conversation.

        Increments message_count by one and refreshes last activity.

        Raises:
            NotFoundError: If the conversation does not exist
        """
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None:
                raise NotFoundError(f"Conversation {conversation_id} not found")

            message = Message(
                conversation_id=conversation_id,
                broker_id=broker_id,
                direction=Direction(direction).value,
                content=content,
                intent=intent,
                confidence=confidence,
                unit_id=unit_id,
            )
            self._messages.append(message)

            conversation.message_count += 1
            conversation.touch()
            return message

    def record_exchange(
        self,
        broker: Broker,
        query: str,
        answer: str,
        intent: Optional[str],
        confidence: float,
        unit_id: Optional[str] = None
    ) -> Tuple[Conversation, Message, Message]:
        """
        Persist a query and its answer as an inbound and an outbound turn.

        Both turns are written under one lock acquisition so readers never
        observe half an exchange.

        Returns:
            (conversation, inbound message, outbound message)
        """
        with self._lock:
            conversation = self.get_or_create_conversation(broker)
            inbound = self.append_turn(
                conversation.id,
                broker.id,
                Direction.INBOUND,
                query,
                intent=intent,
            )
            outbound = self.append_turn(
                conversation.id,
                broker.id,
                Direction.OUTBOUND,
                answer,
                intent=intent,
                confidence=confidence,
                unit_id=unit_id,
            )
            return conversation, inbound, outbound

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """Get a conversation by id."""
        with self._lock:
            return self._conversations.get(conversation_id)

    def get_broker_conversation(self, broker_id: str) -> Optional[Conversation]:
        """Get the conversation of a broker, if one was started."""
        with self._lock:
            conversation_id = self._by_broker.get(broker_id)
            return self._conversations.get(conversation_id) if conversation_id else None

    def get_messages(self, conversation_id: str) -> List[Message]:
        """
        Get the turns of a conversation, oldest first.

        Raises:
            NotFoundError: If the conversation does not exist
        """
        with self._lock:
            if conversation_id not in self._conversations:
                raise NotFoundError(f"Conversation {conversation_id} not found")
            messages = [m for m in self._messages if m.conversation_id == conversation_id]
        return sorted(messages, key=lambda m: m.timestamp)

    def list_conversations(self) -> List[Conversation]:
        """List conversations, most recently active first."""
        with self._lock:
            conversations = list(self._conversations.values())
        return sorted(conversations, key=lambda c: c.last_message_at, reverse=True)

    def get_recent_messages(self, limit: int = 50) -> List[Message]:
        """
        Get the most recent turns across all conversations.

        Args:
            limit: Maximum number of messages to return

        Returns:
            Messages, newest first
        """
        with self._lock:
            messages = list(self._messages)
        # Stable sort keeps later appends first on equal timestamps
        messages.reverse()
        messages.sort(key=lambda m: m.timestamp, reverse=True)
        return messages[:limit]

    def count_messages(self, broker_id: Optional[str] = None) -> int:
        """Count stored turns, optionally for one broker."""
        with self._lock:
            if broker_id is None:
                return len(self._messages)
            return sum(1 for m in self._messages if m.broker_id == broker_id)

    def clear(self) -> Dict[str, int]:
        """
        Delete all conversations and messages.

        Returns:
            Counts of deleted conversations and messages
        """
        with self._lock:
            deleted = {
                "conversations": len(self._conversations),
                "messages": len(self._messages),
            }
            self._conversations.clear()
            self._by_broker.clear()
            self._messages.clear()

        logger.warning(f"Cleared conversation log: {deleted}")
        return deleted


# Singleton instance
_conversation_service: Optional[ConversationService] = None


def get_conversation_service() -> ConversationService:
    """
    Get or create the conversation service singleton.

    Returns:
        ConversationService instance
    """
    global _conversation_service

    if _conversation_service is None:
        _conversation_service = ConversationService()

    return _conversation_service
