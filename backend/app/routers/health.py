# app/routers/health.py
from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health_root():
    return {"status": "ok"}

@router.get("/mail")
async def health_mail(request: Request):
    transport = request.app.state.mail_transport
    return {"ok": True, **transport.summary()}
