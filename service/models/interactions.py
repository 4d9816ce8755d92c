"""Post interaction and tag models."""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel


class InteractionRequest(BaseModel):
    user_id: str
    post_id: str
    action: Literal["like", "unlike", "comment", "view"]


class InteractionResponse(BaseModel):
    user_id: str
    post_id: str
    action: str
    tags: List[str]
    updated: bool
    vector: Dict[str, float]


class VectorResponse(BaseModel):
    user_id: str
    vector: Dict[str, float]
    last_updated: Optional[datetime] = None


class ExtractTagsRequest(BaseModel):
    text: str = ""


class ExtractTagsResponse(BaseModel):
    tags: List[str]
