"""Client service - Business logic for client operations"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Client, Vehicle
from .repository import ClientRepository

logger = logging.getLogger(__name__)


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def upsert_intake_client(
        self, name: str, phone: Optional[str], email: Optional[str]
    ) -> Client:
        """
        Reuse the client registered with this email, refreshing name and phone,
        or register a new one. Without an email a new client is always created.
        """
        if email:
            existing = self.repo.get_client_by_email(self.db, email)
            if existing:
                logger.info(f"🔄 Reusing client {existing.id} for {email}")
                return self.repo.update_client(self.db, existing, name=name, phone=phone)

        client = self.repo.create_client(self.db, name=name, phone=phone, email=email)
        logger.info(f"🆕 Created client {client.id}")
        return client

    def register_vehicle(self, client: Client, **vehicle_data) -> Vehicle:
        """Every intake registers its vehicle anew, even for a returning client"""
        return self.repo.create_vehicle(self.db, client, **vehicle_data)
