from fastapi import APIRouter
from pwv_gateway.api.v1 import fetch

api_router = APIRouter()

api_router.include_router(fetch.router, tags=["fetch"])
