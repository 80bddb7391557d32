# app/routers/contact.py
import logging
from fastapi import APIRouter, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.core.contact_config import ALLOW_METHODS, ContactConfig
from app.core.mail_transport import MailTransport
from app.lib.compose import compose_message
from app.lib.inquiry import ValidationError, parse_inquiry

log = logging.getLogger("uvicorn.error")

CONTACT_PATH = "/api/contact"
SEND_FAILED = "Failed to send message. Please try again."
OTHER_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "TRACE", "CONNECT"]


class ContactHandler:
    """
    Contact form endpoint. Config and transport are fixed when the handler is
    built; nothing is shared between requests.
    """

    def __init__(self, config: ContactConfig, transport: MailTransport):
        self.config = config
        self.transport = transport

    def _cors(self, request: Request) -> dict:
        return self.config.cors.headers_for(request.headers.get("origin"))

    async def preflight(self, request: Request) -> Response:
        return Response(status_code=204, headers=self._cors(request))

    async def method_not_allowed(self, request: Request) -> JSONResponse:
        headers = {**self._cors(request), "Allow": ALLOW_METHODS}
        return JSONResponse({"error": "Method not allowed"}, status_code=405, headers=headers)

    async def submit(self, request: Request) -> JSONResponse:
        headers = self._cors(request)
        try:
            payload = await request.json()
            inquiry = parse_inquiry(payload)
            message = compose_message(inquiry, self.config)
            await run_in_threadpool(self.transport.send, message)
        except ValidationError as exc:
            log.info(f"[contact] rejected submission: {exc.code}")
            return JSONResponse({"error": exc.message}, status_code=400, headers=headers)
        except Exception:
            log.exception("[contact] email send failed")
            return JSONResponse({"error": SEND_FAILED}, status_code=500, headers=headers)

        log.info(f"[contact] forwarded inquiry via {self.transport.name} reply_to={inquiry.email}")
        return JSONResponse({"success": True}, status_code=200, headers=headers)


def build_router(config: ContactConfig, transport: MailTransport, path: str = CONTACT_PATH) -> APIRouter:
    handler = ContactHandler(config, transport)
    router = APIRouter(tags=["contact"])
    router.add_api_route(path, handler.submit, methods=["POST"])
    router.add_api_route(path, handler.preflight, methods=["OPTIONS"], include_in_schema=False)
    router.add_api_route(path, handler.method_not_allowed, methods=OTHER_METHODS, include_in_schema=False)
    return router
