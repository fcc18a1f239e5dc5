"""User Routes - application user CRUD."""

import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, status

from invoice_desk.api.dependencies import get_sync
from invoice_desk.core.domain_types import EntityKind
from invoice_desk.core.errors import ResourceNotFoundError
from invoice_desk.schemas.directory import UserCreate, UserResponse, UserUpsert
from invoice_desk.services.entity_sync import EntitySync

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(sync: EntitySync = Depends(get_sync)):
    return [UserResponse.from_entity(u) for u in sync.store.users.all()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, sync: EntitySync = Depends(get_sync)):
    user = sync.store.users.get(user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return UserResponse.from_entity(user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    background_tasks: BackgroundTasks,
    sync: EntitySync = Depends(get_sync),
):
    user = sync.apply_upsert(EntityKind.USER, body.to_entity(body.id or str(uuid.uuid4())))
    background_tasks.add_task(sync.persist_upsert, EntityKind.USER, user)
    return UserResponse.from_entity(user)


@router.put("/{user_id}", response_model=UserResponse)
async def replace_user(
    user_id: str,
    body: UserUpsert,
    background_tasks: BackgroundTasks,
    sync: EntitySync = Depends(get_sync),
):
    user = sync.apply_upsert(EntityKind.USER, body.to_entity(user_id))
    background_tasks.add_task(sync.persist_upsert, EntityKind.USER, user)
    return UserResponse.from_entity(user)


@router.delete("/{user_id}", status_code=status.HTTP_202_ACCEPTED)
async def delete_user(
    user_id: str,
    background_tasks: BackgroundTasks,
    sync: EntitySync = Depends(get_sync),
):
    removed = sync.apply_delete(EntityKind.USER, user_id)
    background_tasks.add_task(sync.persist_delete, EntityKind.USER, user_id)
    return {"id": user_id, "deleted": removed}
