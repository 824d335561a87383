import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from souqlink.api import register_error_handlers, routers


@pytest.fixture()
def client(_souqlink_domain):
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with _souqlink_domain.domain_context():
            return await call_next(request)

    for router in routers:
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app)
