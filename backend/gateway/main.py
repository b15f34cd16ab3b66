from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from gateway.config import Settings, settings as default_settings
from gateway.routes import health, proxy


def create_app(settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """
    Build the gateway. `transport` replaces the network layer of the upstream
    client, which is how tests stand in for the inference service.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(
            base_url=settings.upstream_url,
            timeout=settings.upstream_timeout,
            transport=transport,
        ) as client:
            app.state.upstream = client
            yield

    app = FastAPI(title="SER Gateway", lifespan=lifespan)
    app.state.settings = settings

    # No credentials: with credentials Starlette echoes the Origin instead of "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # CORSMiddleware stays silent without an Origin header; the header goes on every response
    @app.middleware("http")
    async def allow_any_origin(request: Request, call_next):
        response = await call_next(request)
        response.headers["access-control-allow-origin"] = "*"
        return response

    app.include_router(health.router)
    app.include_router(proxy.router, prefix=settings.api_prefix)
    return app


app = create_app()
