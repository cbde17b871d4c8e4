import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from noisesentinel import __version__
from noisesentinel.config import settings
from noisesentinel.database import create_tables, async_session
from noisesentinel.seed import seed_data
from noisesentinel.routers.accused import router as accused_router
from noisesentinel.routers.auth import router as auth_router
from noisesentinel.routers.case_statements import router as case_statements_router
from noisesentinel.routers.cases import router as cases_router
from noisesentinel.routers.challans import router as challans_router
from noisesentinel.routers.courts import router as courts_router
from noisesentinel.routers.devices import router as devices_router
from noisesentinel.routers.emission_reports import router as emission_reports_router
from noisesentinel.routers.firs import router as firs_router
from noisesentinel.routers.public import router as public_router
from noisesentinel.routers.stations import router as stations_router
from noisesentinel.routers.users import router as users_router
from noisesentinel.routers.vehicles import router as vehicles_router
from noisesentinel.routers.violations import router as violations_router
from noisesentinel.utils.exceptions import register_exception_handlers
from noisesentinel.utils.response import success_response

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    async with async_session() as session:
        await seed_data(session)
    logger.info("NoiseSentinel API %s started", __version__)
    yield


app = FastAPI(
    title="NoiseSentinel API",
    description="Traffic noise violation enforcement: emission reports, challans, FIRs and court cases",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

for router in (
    auth_router,
    users_router,
    stations_router,
    courts_router,
    violations_router,
    devices_router,
    emission_reports_router,
    vehicles_router,
    accused_router,
    challans_router,
    firs_router,
    cases_router,
    case_statements_router,
    public_router,
):
    app.include_router(router, prefix="/api")


@app.get("/health")
async def health_check():
    return success_response(data={"service": "noisesentinel-api", "version": __version__})
