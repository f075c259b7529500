"""
Broker registry service: who may query the assistant.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Iterable

from ..exceptions import NotFoundError
from ..models.records import Broker

logger = logging.getLogger(__name__)


@dataclass
class AuthorizationResult:
    """Outcome of an authorization lookup."""

    authorized: bool
    broker: Optional[Broker] = None


class BrokerService:
    """
    Service for managing registered brokers.

    Brokers are kept in memory, indexed by id and by phone number.
    For production, this should be replaced with a database.
    """

    def __init__(self):
        self._brokers: Dict[str, Broker] = {}
        self._by_phone: Dict[str, str] = {}
        self._lock = threading.RLock()

    def is_authorized(self, phone_number: str) -> AuthorizationResult:
        """
        Check whether a phone number belongs to an authorized broker.

        Args:
            phone_number: Sender phone number (exact match)

        Returns:
            AuthorizationResult with the broker when one is registered
        """
        with self._lock:
            broker_id = self._by_phone.get(phone_number)
            broker = self._brokers.get(broker_id) if broker_id else None
            return AuthorizationResult(authorized=bool(broker and broker.authorized), broker=broker)

    def add_broker(
        self,
        phone_number: str,
        name: str,
        email: Optional[str] = None,
        authorized: bool = False
    ) -> Broker:
        """
        Register a new broker.

        Raises:
            ValueError: If a broker with this phone number already exists
        """
        with self._lock:
            if phone_number in self._by_phone:
                raise ValueError("Broker with this phone number already exists")

            broker = Broker(phone_number=phone_number, name=name, email=email, authorized=authorized)
            self._brokers[broker.id] = broker
            self._by_phone[phone_number] = broker.id

        logger.info(f"Registered broker {name} ({phone_number}), authorized={authorized}")
        return broker

    def authorize_broker(self, phone_number: str, name: str, email: Optional[str] = None) -> Dict[str, Any]:
        """
        Register a broker as authorized, or authorize an existing one.

        Returns:
            Dict with a status message and the broker id
        """
        with self._lock:
            broker_id = self._by_phone.get(phone_number)
            if broker_id:
                self._brokers[broker_id].authorized = True
                return {"message": "Broker updated to authorized", "broker_id": broker_id}

            broker = self.add_broker(phone_number, name, email=email, authorized=True)
            return {"message": "Broker added successfully", "broker_id": broker.id}

    def update_authorization(self, broker_id: str, authorized: bool) -> Broker:
        """
        Grant or revoke a broker's authorization.

        Raises:
            NotFoundError: If the broker does not exist
        """
        with self._lock:
            broker = self._brokers.get(broker_id)
            if broker is None:
                raise NotFoundError(f"Broker {broker_id} not found")
            broker.authorized = authorized
            return broker

    def delete_broker(self, broker_id: str) -> bool:
        """
        Delete a broker.

        Returns:
            True if deleted, False if not found
        """
        with self._lock:
            broker = self._brokers.pop(broker_id, None)
            if broker is None:
                return False
            self._by_phone.pop(broker.phone_number, None)
            return True

    def get_broker(self, broker_id: str) -> Optional[Broker]:
        """Get a broker by id."""
        with self._lock:
            return self._brokers.get(broker_id)

    def list_brokers(self) -> List[Broker]:
        """List all brokers in registration order."""
        with self._lock:
            return list(self._brokers.values())

    def load_brokers(self, records: Iterable[Dict[str, Any]]) -> int:
        """
        Seed brokers from plain records, skipping phone numbers already registered.

        Args:
            records: Dicts with phone_number, name, optional email and authorized

        Returns:
            Number of brokers added
        """
        added = 0
        for record in records:
            try:
                self.add_broker(
                    phone_number=str(record["phone_number"]),
                    name=str(record["name"]),
                    email=record.get("email") or None,
                    authorized=bool(record.get("authorized", True)),
                )
                added += 1
            except ValueError:
                continue
        return added


# Singleton instance
_broker_service: Optional[BrokerService] = None


def get_broker_service() -> BrokerService:
    """
    Get or create the broker service singleton.

    Returns:
        BrokerService instance
    """
    global _broker_service

    if _broker_service is None:
        _broker_service = BrokerService()

    return _broker_service
