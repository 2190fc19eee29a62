from pydantic import BaseModel, HttpUrl, Field, computed_field, ConfigDict
from typing import Optional
from datetime import datetime
from fupisha.config import settings


class URLCreate(BaseModel):
    long_url: HttpUrl = Field(..., description="The original URL to be shortened")
    alias: Optional[str] = Field(
        None,
        pattern=r"^[A-Za-z0-9_-]{1,32}$",
        description="Custom alias; generated when omitted",
    )
    expires_at: Optional[datetime] = Field(None, description="Redirects stop after this moment")


class URLUpdate(BaseModel):
    long_url: Optional[HttpUrl] = None
    expires_at: Optional[datetime] = None


class URLResponse(BaseModel):
    """Response schema that automatically serializes the URL model

    - from_attributes=True enables ORM mode (reads from model attributes)
    - @computed_field creates derived fields
    """
    id: int
    alias: str
    long_url: str
    owner_id: int
    total_hits: int
    expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def short_url(self) -> str:
        """Computed field - automatically generated from alias"""
        return f"{settings.base_url}/{self.alias}"

    model_config = ConfigDict(from_attributes=True)


class URLStats(BaseModel):
    alias: str
    total_hits: int
    created_at: datetime
    last_accessed: Optional[datetime] = None
