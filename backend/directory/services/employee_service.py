"""Cosmos DB employee gateway (CRUD over a single container)."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient
from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError

from directory.core.config import Settings
from directory.core.errors import ConflictError, NotFoundError, StoreUnavailableError
from directory.models.employee import Employee, EmployeeCreate, EmployeeUpdate

logger = logging.getLogger(__name__)

# All employees live in one logical partition so the unique key on /email
# covers the whole directory.
PARTITION_KEY_PATH = "/kind"
PARTITION_VALUE = "employee"
UNIQUE_KEY_POLICY: dict[str, Any] = {"uniqueKeys": [{"paths": ["/email"]}]}

DUPLICATE_EMAIL_MESSAGE = "Employee with this email already exists"
DUPLICATE_EMAIL_ON_UPDATE_MESSAGE = "Another employee with this email already exists"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EmployeeService:
    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.container: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        endpoint = settings.COSMOS_DB_ENDPOINT
        key = settings.COSMOS_DB_KEY
        database_name = settings.COSMOS_DB_DATABASE
        container_name = settings.COSMOS_DB_EMPLOYEES_CONTAINER

        if not endpoint or not key:
            logger.warning("Cosmos DB credentials missing, EmployeeService not initialized")
            return

        self.client = CosmosClient(endpoint, key)
        if settings.COSMOS_DB_AUTO_PROVISION:
            db = await self.client.create_database_if_not_exists(id=database_name)
            self.container = await db.create_container_if_not_exists(
                id=container_name,
                partition_key=PartitionKey(path=PARTITION_KEY_PATH),
                unique_key_policy=UNIQUE_KEY_POLICY,
            )
        else:
            db = self.client.get_database_client(database_name)
            self.container = db.get_container_client(container_name)
        self.initialized = True
        logger.info("EmployeeService initialized (container=%s)", container_name)

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None
            self.container = None
            self.initialized = False

    def _require_container(self) -> Any:
        if not self.container:
            raise StoreUnavailableError()
        return self.container

    async def list_employees(self) -> list[Employee]:
        container = self._require_container()

        query = "SELECT * FROM c ORDER BY c.createdAt DESC"
        results: list[Employee] = []
        async for item in container.query_items(query=query, partition_key=PARTITION_VALUE):
            results.append(self._transform_employee(item))
        return results

    async def get_employee(self, employee_id: str) -> Employee:
        return self._transform_employee(await self._read(employee_id))

    async def create_employee(self, payload: EmployeeCreate) -> Employee:
        container = self._require_container()

        if await self._email_taken(payload.email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        now = _utcnow()
        doc: dict[str, Any] = {"phone": "", **payload.changes()}
        doc.setdefault("joiningDate", now.date().isoformat())
        doc.update(
            id=uuid.uuid4().hex,
            kind=PARTITION_VALUE,
            createdAt=now.isoformat(),
            updatedAt=now.isoformat(),
        )

        try:
            created = await container.create_item(body=doc)
        except CosmosResourceExistsError as err:
            # Unique key on /email rejected a write that raced the pre-check.
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from err

        logger.info("Created employee %s", created["id"])
        return self._transform_employee(created)

    async def update_employee(self, employee_id: str, payload: EmployeeUpdate) -> Employee:
        container = self._require_container()
        existing = await self._read(employee_id)

        changes = payload.changes()
        new_email = changes.get("email")
        if new_email and new_email != existing.get("email"):
            if await self._email_taken(new_email, exclude_id=employee_id):
                raise ConflictError(DUPLICATE_EMAIL_ON_UPDATE_MESSAGE)

        doc = {**existing, **changes, "updatedAt": _utcnow().isoformat()}
        try:
            updated = await container.replace_item(item=employee_id, body=doc)
        except CosmosResourceNotFoundError as err:
            raise NotFoundError() from err
        except CosmosResourceExistsError as err:
            raise ConflictError(DUPLICATE_EMAIL_ON_UPDATE_MESSAGE) from err

        logger.info("Updated employee %s", employee_id)
        return self._transform_employee(updated)

    async def delete_employee(self, employee_id: str) -> None:
        container = self._require_container()
        try:
            await container.delete_item(item=employee_id, partition_key=PARTITION_VALUE)
        except CosmosResourceNotFoundError as err:
            raise NotFoundError() from err
        logger.info("Deleted employee %s", employee_id)

    async def check_connection(self) -> bool:
        if not self.container:
            return False
        try:
            query = "SELECT VALUE COUNT(1) FROM c"
            async for _ in self.container.query_items(query=query, partition_key=PARTITION_VALUE):
                return True
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False

    async def _read(self, employee_id: str) -> dict[str, Any]:
        container = self._require_container()
        try:
            return await container.read_item(item=employee_id, partition_key=PARTITION_VALUE)
        except CosmosResourceNotFoundError as err:
            raise NotFoundError() from err

    async def _email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        container = self._require_container()

        query = "SELECT VALUE c.id FROM c WHERE c.email = @email"
        params: list[dict[str, Any]] = [{"name": "@email", "value": email}]
        async for found_id in container.query_items(
            query=query,
            parameters=params,
            partition_key=PARTITION_VALUE,
        ):
            if found_id != exclude_id:
                return True
        return False

    def _transform_employee(self, raw: dict[str, Any]) -> Employee:
        # Drop the partition value and Cosmos system properties (_rid, _etag, ...).
        data = {k: v for k, v in raw.items() if k != "kind" and not k.startswith("_")}
        return Employee.model_validate(data)


employee_service = EmployeeService()
