from fastapi import APIRouter

from app.api.v1.endpoints import break_cipher

api_router = APIRouter()

api_router.include_router(
    break_cipher.router,
    prefix="/break-cipher",
    tags=["Cipher Breaking"],
)
