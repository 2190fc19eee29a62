from typing import List

from fastapi import APIRouter, Depends, status
from fupisha.dependencies import get_current_user, get_url_service
from fupisha.models import User
from fupisha.schemas.url import URLCreate, URLResponse, URLStats, URLUpdate
from fupisha.services.url_service import URLService

router = APIRouter(prefix="/urls", tags=["urls"])


@router.post("/", response_model=URLResponse, status_code=status.HTTP_201_CREATED)
def create_short_url(
    url_data: URLCreate,
    current_user: User = Depends(get_current_user),
    url_service: URLService = Depends(get_url_service)
):
    """Create a new short URL owned by the caller"""
    return url_service.shorten(
        current_user.id,
        str(url_data.long_url),
        alias=url_data.alias,
        expires_at=url_data.expires_at,
    )


@router.get("/", response_model=List[URLResponse])
def list_urls(
    current_user: User = Depends(get_current_user),
    url_service: URLService = Depends(get_url_service)
):
    """List the caller's short URLs"""
    return url_service.list_owned(current_user.id)


@router.get("/{alias}", response_model=URLResponse)
def get_url_info(
    alias: str,
    current_user: User = Depends(get_current_user),
    url_service: URLService = Depends(get_url_service)
):
    """Get information about one of the caller's short URLs"""
    return url_service.get_owned(current_user.id, alias)


@router.get("/{alias}/stats", response_model=URLStats)
def get_url_stats(
    alias: str,
    current_user: User = Depends(get_current_user),
    url_service: URLService = Depends(get_url_service)
):
    url = url_service.get_owned(current_user.id, alias)
    return URLStats(
        alias=url.alias,
        total_hits=url.total_hits,
        created_at=url.created_at,
        last_accessed=url.updated_at
    )


@router.patch("/{alias}", response_model=URLResponse)
def update_url(
    alias: str,
    changes: URLUpdate,
    current_user: User = Depends(get_current_user),
    url_service: URLService = Depends(get_url_service)
):
    """Change the target or expiry of a short URL"""
    return url_service.update_owned(
        current_user.id, alias, **changes.model_dump(exclude_unset=True)
    )


@router.delete("/{alias}", status_code=status.HTTP_204_NO_CONTENT)
def delete_url(
    alias: str,
    current_user: User = Depends(get_current_user),
    url_service: URLService = Depends(get_url_service)
):
    """Delete a short URL. Deleting it again answers 404."""
    url_service.delete_owned(current_user.id, alias)
