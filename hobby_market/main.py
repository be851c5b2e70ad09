import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from hobby_market.api.v1.router import router as v1_router
from hobby_market.core.config import settings
from hobby_market.core.firebase import get_firebase
from hobby_market.core.telemetry import setup_telemetry
from hobby_market.services.audit import audit_auth_event
from hobby_market.web.auth import router as auth_router
from hobby_market.web.pages import router as pages_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    firebase = get_firebase()
    unsubscribe = firebase.on_auth_change(audit_auth_event)
    yield
    unsubscribe()
    await firebase.aclose()


app = FastAPI(title="Hobby Market", version="0.1.0", lifespan=lifespan)

setup_telemetry(app)
app.include_router(v1_router)
app.include_router(auth_router)
app.include_router(pages_router)


def main() -> None:
    import uvicorn

    uvicorn.run("hobby_market.main:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    main()
