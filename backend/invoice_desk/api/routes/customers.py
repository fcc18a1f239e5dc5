"""Customer Routes - customer directory CRUD and client-field lookup for invoices."""

import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, status

from invoice_desk.api.dependencies import get_sync
from invoice_desk.core.domain_types import EntityKind
from invoice_desk.core.entities import Customer
from invoice_desk.core.errors import ResourceNotFoundError
from invoice_desk.core.invoice_drafts import client_fields_from_customer
from invoice_desk.schemas.directory import (
    ClientFieldsResponse, CustomerCreate, CustomerResponse, CustomerUpsert,
)
from invoice_desk.services.entity_sync import EntitySync

router = APIRouter(prefix="/api/v1/customers", tags=["customers"])


def _get_or_404(sync: EntitySync, customer_id: str) -> Customer:
    customer = sync.store.customers.get(customer_id)
    if customer is None:
        raise ResourceNotFoundError("Customer", customer_id)
    return customer


@router.get("", response_model=list[CustomerResponse])
async def list_customers(sync: EntitySync = Depends(get_sync)):
    return [CustomerResponse.from_entity(c) for c in sync.store.customers.all()]


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: str, sync: EntitySync = Depends(get_sync)):
    return CustomerResponse.from_entity(_get_or_404(sync, customer_id))


@router.get("/{customer_id}/client-fields", response_model=ClientFieldsResponse)
async def customer_client_fields(customer_id: str, sync: EntitySync = Depends(get_sync)):
    """Snapshot copied onto an invoice when this customer is picked."""
    fields = client_fields_from_customer(_get_or_404(sync, customer_id))
    return ClientFieldsResponse(
        client_name=fields.client_name,
        client_email=fields.client_email,
        client_address=fields.client_address,
    )


@router.post(
    "", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED,
)
async def create_customer(
    body: CustomerCreate,
    background_tasks: BackgroundTasks,
    sync: EntitySync = Depends(get_sync),
):
    customer = sync.apply_upsert(
        EntityKind.CUSTOMER, body.to_entity(body.id or str(uuid.uuid4())),
    )
    background_tasks.add_task(sync.persist_upsert, EntityKind.CUSTOMER, customer)
    return CustomerResponse.from_entity(customer)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def replace_customer(
    customer_id: str,
    body: CustomerUpsert,
    background_tasks: BackgroundTasks,
    sync: EntitySync = Depends(get_sync),
):
    customer = sync.apply_upsert(EntityKind.CUSTOMER, body.to_entity(customer_id))
    background_tasks.add_task(sync.persist_upsert, EntityKind.CUSTOMER, customer)
    return CustomerResponse.from_entity(customer)


@router.delete("/{customer_id}", status_code=status.HTTP_202_ACCEPTED)
async def delete_customer(
    customer_id: str,
    background_tasks: BackgroundTasks,
    sync: EntitySync = Depends(get_sync),
):
    removed = sync.apply_delete(EntityKind.CUSTOMER, customer_id)
    background_tasks.add_task(sync.persist_delete, EntityKind.CUSTOMER, customer_id)
    return {"id": customer_id, "deleted": removed}
