# pwv_gateway/api/v1/fetch.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from pwv_gateway.api.dependencies import get_fetch_service
from pwv_gateway.schemas.fetch import FetchResponse
from pwv_gateway.services.fetch_service import FetchService

router = APIRouter()


@router.get(
    "/fetch/{safe}/{account_name}",
    response_model=FetchResponse,
    responses={400: {"model": FetchResponse}, 424: {"model": FetchResponse}},
)
async def fetch_password(
    safe: str,
    account_name: str,
    request: Request,
    service: FetchService = Depends(get_fetch_service),
):
    """GET a password from the vault"""
    result = await service.fetch(
        safe,
        account_name,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=result.status_code, content=result.body.model_dump())
