from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from core.config_loader import settings
from core.logging_config import configure_logging

from user.router import user_router
from employee.router import employee_router
from team.router import team_router
from assignment.router import assignment_router
import models_bootstrap

configure_logging()

openapi_tags = [
    {
        "name": "Rota",
        "description": "Shift assignments, shift groups and swap requests",
    },
    {
        "name": "Health Checks",
        "description": "Application health checks",
    }
]

app = FastAPI(title="Rota API", openapi_tags=openapi_tags)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(user_router, prefix="/api")
app.include_router(employee_router, prefix="/api")
app.include_router(team_router, prefix="/api")
app.include_router(assignment_router, prefix="/api")


@app.get("/health", tags=['Health Checks'])
def read_root():
    return {"health": "true"}
