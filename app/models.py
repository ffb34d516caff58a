# app/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Union


class Product(BaseModel):
    # stored documents may hold extra fields or a null price
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[Union[int, float]] = None
    volume: Optional[Union[int, float]] = None
    category: Optional[str] = None
    image: Optional[str] = ""
    created_at: Optional[str] = Field(default=None, alias="createdAt")


class ServiceInfo(BaseModel):
    name: str
    version: str
    environment: str
    endpoints: List[str]
    categories: List[str]


class Health(BaseModel):
    status: str
    timestamp: str
