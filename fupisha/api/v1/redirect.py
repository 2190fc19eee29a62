from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from fupisha.services.url_service import URLService
from fupisha.dependencies import get_url_service

router = APIRouter(tags=["redirect"])


@router.get("/{alias}")
def redirect_to_long_url(
    alias: str,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.

    Unknown and expired aliases answer 404; every redirect counts one hit.
    """
    long_url = url_service.resolve(alias)
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
