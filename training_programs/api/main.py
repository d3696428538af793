from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from training_programs import __version__
from training_programs.api.routers import programs


class HealthStatus(BaseModel):
    status: str
    version: str


app = FastAPI(title="Training Programs API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_v1 = APIRouter(prefix="/api/v1")


@api_v1.get("/health")
async def health_check() -> HealthStatus:
    """Return health status of the API."""
    return {"status": "healthy", "version": __version__}


api_v1.include_router(programs.router)

app.include_router(api_v1)
