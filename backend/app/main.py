# app/main.py
from typing import Optional
from fastapi import FastAPI
from fastapi.routing import APIRoute
import logging

from app.core.contact_config import ContactConfig
from app.core.mail_transport import FakeTransport, MailTransport, get_transport
from app.core.settings import Settings, settings as default_settings
from app.routers.contact import build_router as build_contact_router
from app.routers.health import router as health_router


def create_app(settings: Optional[Settings] = None, transport: Optional[MailTransport] = None) -> FastAPI:
    if settings is None:
        settings = default_settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = ContactConfig.from_settings(settings)
    if transport is None:
        transport = get_transport(settings)

    app = FastAPI(title=settings.api_title)
    app.state.mail_transport = transport

    log = logging.getLogger("uvicorn.error")
    log.info(f"[main] mail transport = {transport.name}, recipient = {config.recipient}")
    if transport.name == FakeTransport.name:
        log.warning("[main] MAIL_TRANSPORT=fake: submissions are accepted but no email is delivered")

    # Routers
    app.include_router(build_contact_router(config, transport))
    app.include_router(health_router)

    @app.get("/__routes")
    async def __routes():
        return [
            {"methods": sorted(list(r.methods)), "path": r.path}
            for r in app.routes
            if isinstance(r, APIRoute)
        ]

    return app


# run it with: uvicorn app.main:app --app-dir backend
app = create_app()
