"""Client CRUD with best-effort AI refresh"""

from typing import List, Optional

from sqlalchemy.orm import Session

from paywise_gateway.domain.models import OperationResult
from paywise_gateway.infrastructure.database.models import Client, PaymentRequest
from paywise_gateway.infrastructure.database.repositories import ClientRepository, PaymentRepository
from paywise_gateway.services.insights import InsightRefresher


class ClientService:
    """Client operations; the store mutation is authoritative, the AI refresh is not"""

    def __init__(self, db: Session, refresher: InsightRefresher):
        self.db = db
        self.clients = ClientRepository(db)
        self.payments = PaymentRepository(db)
        self.refresher = refresher

    def list_clients(self) -> List[Client]:
        return self.clients.list()

    def get_client(self, client_id: str) -> Client:
        return self.clients.get(client_id)

    async def create_client(self, name: str, email: str, phone: str) -> OperationResult[Client]:
        client = self.clients.create(name=name, email=email, phone=phone)
        self.db.commit()

        warnings = await self.refresher.refresh_best_effort(self.clients, client, step="create")
        self.db.commit()
        return OperationResult(client, warnings)

    async def update_client(
        self,
        client_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> OperationResult[Client]:
        client = self.clients.update(client_id, name=name, email=email, phone=phone)
        self.db.commit()

        warnings = await self.refresher.refresh_best_effort(self.clients, client, step="update")
        self.db.commit()
        return OperationResult(client, warnings)

    def delete_client(self, client_id: str) -> bool:
        deleted = self.clients.delete(client_id)
        self.db.commit()
        return deleted

    async def refresh_insights(self, client_id: str) -> Client:
        """Explicit refresh: provider failure propagates as AIRefreshError"""
        client = self.clients.get(client_id)
        await self.refresher.refresh(self.clients, client)
        self.db.commit()
        return client

    def list_client_payments(self, client_id: str) -> List[PaymentRequest]:
        client = self.clients.get(client_id)
        return self.payments.list_by_client(client)
