from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from src.common.logger import log_error
from src.core.couriers.errors import (
    CourierNotFoundError,
    CourierPhoneExistsError,
    CourierServiceError,
    CouriersBusyError,
    InvalidCourierUpdateError,
)
from src.core.couriers.models import CourierCreateDTO, CourierUpdateDTO
from src.core.couriers.service import CourierService
from src.core.deliveries.errors import (
    NoOrderIDError,
    OrderIDExistsError,
    OrderIDNotFoundError,
    OrderNotFoundError,
)
from src.core.deliveries.service import AssignmentService, ReleaseService
from src.services.courier_service.dependencies import (
    get_assignment_service,
    get_courier_service,
    get_release_service,
)
from src.services.courier_service.schemas import (
    AssignResponse,
    CourierCreateRequest,
    CourierCreateResponse,
    CourierResponse,
    CourierUpdateRequest,
    CourierUpdateResponse,
    DeliveryRequest,
    UnassignResponse,
)

router = APIRouter()

# Исключение -> HTTP статус; всё, чего нет в таблице, отдаётся как 500
_ERROR_STATUS = {
    NoOrderIDError: status.HTTP_400_BAD_REQUEST,
    InvalidCourierUpdateError: status.HTTP_400_BAD_REQUEST,
    CouriersBusyError: status.HTTP_409_CONFLICT,
    OrderIDExistsError: status.HTTP_409_CONFLICT,
    CourierPhoneExistsError: status.HTTP_409_CONFLICT,
    OrderIDNotFoundError: status.HTTP_404_NOT_FOUND,
    OrderNotFoundError: status.HTTP_404_NOT_FOUND,
    CourierNotFoundError: status.HTTP_404_NOT_FOUND,
}


async def _to_http_error(e: CourierServiceError) -> HTTPException:
    code = _ERROR_STATUS.get(type(e))
    if code is None:
        await log_error(f"Внутренняя ошибка: {e}")
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
    return HTTPException(status_code=code, detail=str(e))


@router.post("/delivery/assign", response_model=AssignResponse, tags=["Delivery"])
async def assign_delivery(
    request: DeliveryRequest,
    service: AssignmentService = Depends(get_assignment_service)
):
    try:
        result = await service.assign(request.order_id)
    except CourierServiceError as e:
        raise await _to_http_error(e)
    return AssignResponse(
        courier_id=result.courier_id,
        order_id=result.order_id,
        transport_type=result.transport_type,
        delivery_deadline=result.deadline,
    )


@router.post("/delivery/unassign", response_model=UnassignResponse, tags=["Delivery"])
async def unassign_delivery(
    request: DeliveryRequest,
    service: ReleaseService = Depends(get_release_service)
):
    try:
        result = await service.unassign(request.order_id)
    except CourierServiceError as e:
        raise await _to_http_error(e)
    return UnassignResponse(order_id=result.order_id, status=result.status, courier_id=result.courier_id)


@router.get("/couriers", response_model=List[CourierResponse], tags=["Couriers"])
async def get_all_couriers(
    service: CourierService = Depends(get_courier_service)
):
    try:
        couriers = await service.get_all_couriers()
    except CourierServiceError as e:
        raise await _to_http_error(e)
    return [CourierResponse.model_validate(c, from_attributes=True) for c in couriers]


@router.get("/couriers/{courier_id}", response_model=CourierResponse, tags=["Couriers"])
async def get_courier(
    courier_id: int,
    service: CourierService = Depends(get_courier_service)
):
    try:
        courier = await service.get_courier(courier_id)
    except CourierServiceError as e:
        raise await _to_http_error(e)
    return CourierResponse.model_validate(courier, from_attributes=True)


@router.post(
    "/couriers",
    response_model=CourierCreateResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Couriers"],
)
async def create_courier(
    request: CourierCreateRequest,
    service: CourierService = Depends(get_courier_service)
):
    try:
        courier = await service.create_courier(
            CourierCreateDTO(name=request.name, phone=request.phone, transport_type=request.transport_type)
        )
    except CourierServiceError as e:
        raise await _to_http_error(e)
    return CourierCreateResponse(id=courier.id)


@router.put("/couriers", response_model=CourierUpdateResponse, tags=["Couriers"])
async def update_courier(
    request: CourierUpdateRequest,
    service: CourierService = Depends(get_courier_service)
):
    try:
        courier = await service.update_courier(CourierUpdateDTO(**request.model_dump()))
    except CourierServiceError as e:
        raise await _to_http_error(e)
    return CourierUpdateResponse(id=courier.id)
