from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from chamber.hub import Hub
from chamber.web import router as web_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        # Sessions still open at shutdown see their channel close and unwind.
        await app.state.hub.close_all()


def create_app(hub: Optional[Hub] = None) -> FastAPI:
    app = FastAPI(lifespan=lifespan)
    app.state.hub = hub if hub is not None else Hub()
    app.include_router(web_router)
    return app
