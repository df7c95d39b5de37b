import asyncio
import sys
import os

# Add project root to path
sys.path.append(os.getcwd())

from src.common.constants import TransportType
from src.core.couriers.errors import CourierPhoneExistsError
from src.core.couriers.models import CourierCreateDTO
from src.core.factory import build_courier_service
from src.infra.database import init_db, close_db

DEV_COURIERS = [
    CourierCreateDTO(name="Иван Пеший", phone="+79990000001", transport_type=TransportType.ON_FOOT),
    CourierCreateDTO(name="Пётр Самокатов", phone="+79990000002", transport_type=TransportType.SCOOTER),
    CourierCreateDTO(name="Анна Машинина", phone="+79990000003", transport_type=TransportType.CAR),
]

async def main():
    await init_db()
    print("Connected to DB")

    service = build_courier_service()
    for dto in DEV_COURIERS:
        try:
            courier = await service.create_courier(dto)
            print(f"Courier {courier.id} ({dto.transport_type.value}) created")
        except CourierPhoneExistsError:
            print(f"Courier with phone {dto.phone} already exists")

    await close_db()

if __name__ == "__main__":
    asyncio.run(main())
