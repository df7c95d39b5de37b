# src/services/courier_service/dependencies.py
from src.core.couriers.service import CourierService
from src.core.deliveries.service import AssignmentService, ReleaseService
from src.core.factory import build_assignment_service, build_courier_service, build_release_service
from src.infra.database import DatabaseManager, get_db


def get_database() -> DatabaseManager:
    return get_db()


def get_courier_service() -> CourierService:
    return build_courier_service(get_database())


def get_assignment_service() -> AssignmentService:
    return build_assignment_service(get_database())


def get_release_service() -> ReleaseService:
    return build_release_service(get_database())
