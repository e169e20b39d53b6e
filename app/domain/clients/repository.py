"""Client repository - Database operations for clients and vehicles"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Client, Vehicle


class ClientRepository:
    """
    Repository for client and vehicle database operations.
    Writes are flushed, not committed: the intake commits clients, vehicles
    and the repair as one unit.
    """

    @staticmethod
    def get_client_by_email(db: Session, email: str) -> Optional[Client]:
        """Get the oldest client registered with this email"""
        return (
            db.query(Client)
            .filter(Client.email == email)
            .order_by(Client.id.asc())
            .first()
        )

    @staticmethod
    def create_client(db: Session, **client_data) -> Client:
        client = Client(**client_data)
        db.add(client)
        db.flush()
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        """Update a client with provided fields"""
        for key, value in updates.items():
            if hasattr(client, key):
                setattr(client, key, value)
        db.flush()
        return client

    @staticmethod
    def create_vehicle(db: Session, client: Client, **vehicle_data) -> Vehicle:
        vehicle = Vehicle(client_id=client.id, **vehicle_data)
        db.add(vehicle)
        db.flush()
        return vehicle
