import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from src.services.courier_service.routes import router
from src.infra.database import init_db, close_db, get_db
from src.worker.couriers import FreeCouriersWorker
from src.common.logger import log_info, setup_logging, TypeMsg
from src.config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    await log_info("Starting Courier Service...", type_msg=TypeMsg.INFO)

    # В режиме all пул уже открыт в main.py
    owns_db = not get_db().is_connected
    if owns_db:
        await init_db()

    sweeper = FreeCouriersWorker()
    await sweeper.start()
    app.state.sweeper = sweeper

    yield

    # Shutdown
    await log_info("Shutting down Courier Service...", type_msg=TypeMsg.INFO)
    await sweeper.stop()
    if owns_db:
        await close_db()


app = FastAPI(
    title="Courier Service",
    description="Назначение заказов курьерам и жизненный цикл курьеров",
    version=settings.system.VERSION,
    lifespan=lifespan
)

app.include_router(router, prefix="/api/v1")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    await log_info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)",
        type_msg=TypeMsg.DEBUG,
    )
    return response


@app.get("/health")
async def health_check():
    if await get_db().health_check():
        return {"status": "ok", "service": "courier_service", "database": "ok"}
    return JSONResponse(
        status_code=503,
        content={"status": "degraded", "service": "courier_service", "database": "unavailable"},
    )


@app.get("/ping")
async def ping():
    return {"message": "pong"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.services.courier_service.app:app",
        host=settings.server.API_HOST,
        port=settings.server.API_PORT,
    )
