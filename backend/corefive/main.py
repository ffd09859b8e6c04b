from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from corefive.api.logs import router as logs_router
from corefive.api.progress import router as progress_router
from corefive.db import Base, engine
from corefive.models.activity_log import ActivityLog  # noqa: F401  (import ensures table is registered)
from corefive.models.milestone_seen import MilestoneSeen  # noqa: F401
from corefive.core.config import settings
from corefive.core.logging_config import setup_logging
from corefive.core.pillars import PILLAR_CONFIGS
from corefive.schemas.progress import PillarConfigRead


setup_logging(settings.log_level)

app = FastAPI()

# Allow CORS for local frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables on startup
Base.metadata.create_all(bind=engine)

app.include_router(logs_router)
app.include_router(progress_router)


@app.get("/")
def root():
    return {"message": "Core Five backend is running"}


@app.get("/pillars", response_model=list[PillarConfigRead])
def list_pillars():
    return [PillarConfigRead.model_validate(c) for c in PILLAR_CONFIGS.values()]
