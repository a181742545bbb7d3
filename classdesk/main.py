from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request

from classdesk.config import settings
from classdesk.db import Base, engine
from classdesk.routers import attendance, bookings, classrooms, groups, payments, preferences, students, teachers
from classdesk.services.store_provider import init_store

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.storage_backend != 'memory':
        Base.metadata.create_all(bind=engine)
    init_store()
    yield


app = FastAPI(title=settings.app_name, version='0.1.0', lifespan=lifespan)


@app.middleware('http')
async def slow_request_logger(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000.0
    if duration_ms >= settings.metrics_slow_ms:
        logging.getLogger('classdesk.request').info(
            'request_slow path=%s method=%s status_code=%s duration_ms=%.2f',
            request.url.path,
            request.method,
            response.status_code,
            duration_ms,
        )
    return response

app.include_router(teachers.router)
app.include_router(groups.router)
app.include_router(students.router)
app.include_router(classrooms.router)
app.include_router(bookings.router)
app.include_router(attendance.router)
app.include_router(payments.router)
app.include_router(preferences.router)


@app.get('/')
def health():
    return {'app': settings.app_name, 'status': 'ok'}


@app.get('/health')
def healthcheck():
    return {'status': 'ok'}
