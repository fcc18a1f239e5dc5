"""Business Settings Routes - read and replace the singleton business profile."""

from fastapi import APIRouter, BackgroundTasks, Depends

from invoice_desk.api.dependencies import get_sync
from invoice_desk.schemas.settings import BusinessSettingsBody
from invoice_desk.services.entity_sync import EntitySync

router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


@router.get("", response_model=BusinessSettingsBody)
async def get_business_settings(sync: EntitySync = Depends(get_sync)):
    return BusinessSettingsBody.from_entity(sync.store.settings.current)


@router.put("", response_model=BusinessSettingsBody)
async def save_business_settings(
    body: BusinessSettingsBody,
    background_tasks: BackgroundTasks,
    sync: EntitySync = Depends(get_sync),
):
    """Replaces the one settings record; there is never a second."""
    saved = sync.apply_settings(body.to_entity())
    background_tasks.add_task(sync.persist_settings, saved)
    return BusinessSettingsBody.from_entity(saved)
