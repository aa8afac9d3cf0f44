from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.use_cases.reference_data.reference_data import \
    ReferenceDataService
from src.domain.entities.actor import Actor
from src.presentation.api.dependencies import (get_current_actor,
                                               get_reference_data_service)
from src.presentation.api.v1.schemas.base import ApiResponse

router = APIRouter()

CurrentActor = Annotated[Actor, Depends(get_current_actor)]
Service = Annotated[ReferenceDataService, Depends(get_reference_data_service)]


@router.delete("/taskstatuses/{status_id}", response_model=ApiResponse)
async def delete_task_status(status_id: int, actor: CurrentActor, service: Service):
    """Hard delete a status no task refers to (409 otherwise)"""
    await service.delete_status(actor, status_id)
    return ApiResponse(message="Task status deleted successfully.")


@router.delete("/taskpriorities/{priority_id}", response_model=ApiResponse)
async def delete_task_priority(priority_id: int, actor: CurrentActor, service: Service):
    """Hard delete a priority no task refers to (409 otherwise)"""
    await service.delete_priority(actor, priority_id)
    return ApiResponse(message="Task priority deleted successfully.")
