"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from autofinder.adapters.inbound.http.routes import router
from autofinder.infrastructure.wiring.dependencies import create_search_coordinator

# Load environment variables from .env file
load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.search_coordinator = await create_search_coordinator()
    yield
    await app.state.search_coordinator.close()


app = FastAPI(
    title="AutoFinder Search Sync",
    description="Paginated, cached car search over the AutoFinder catalog API",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(router)
