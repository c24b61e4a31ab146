import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from wastecollect.core import config
from wastecollect.database import Base, engine, ensure_pickup_schema
from wastecollect.models import donation, ngo, pickup, user  # noqa: F401
from wastecollect.routes import auth_routes, driver_routes, ngo_routes, pickup_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)
logger = logging.getLogger(__name__)


def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_pickup_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.validate_runtime_config()
    initialize_database()
    yield


app = FastAPI(title='Waste Collection API', lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials='*' not in config.CORS_ALLOW_ORIGINS,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    message = str(first.get('msg', 'Invalid request.')).removeprefix('Value error, ')
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            'detail': message,
            'errors': jsonable_encoder(errors, exclude={'ctx', 'input'}),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': str(exc) or exc.__class__.__name__},
    )


@app.get('/', response_class=PlainTextResponse)
def root():
    return 'Hello from the Waste Management Backend!'


app.include_router(auth_routes.router, prefix='/api/auth')
app.include_router(pickup_routes.router, prefix='/api')
app.include_router(driver_routes.router, prefix='/api')
app.include_router(ngo_routes.router, prefix='/api')
