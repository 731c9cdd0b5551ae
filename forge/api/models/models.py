from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AssetType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DATA = "data"
    HTML = "html"
    DOCUMENT = "document"


class AssetRecord(BaseModel):
    """A work product registered in the vault. Serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str
    type: AssetType
    title: str
    data: str
    module: str
    timestamp: int  # epoch ms
    lead_id: Optional[str] = Field(default=None, alias="leadId")
    metadata: Optional[Dict[str, Any]] = None


class Lead(BaseModel):
    # the lead schema lives with the client; only identity and name are read here
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    business_name: str = Field(default="", alias="businessName")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class EngineResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    leads: List[Lead] = []
    rubric: Dict[str, Any] = {}
    assets: Dict[str, Any] = {}

    @field_validator("leads", "rubric", "assets", mode="before")
    @classmethod
    def _null_as_empty(cls, v, info):
        if v is None:
            return [] if info.field_name == "leads" else {}
        return v


class BenchmarkReport(BaseModel):
    model_config = ConfigDict(extra="allow")


class VeoConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    aspect_ratio: Optional[str] = Field(default=None, alias="aspectRatio")
    resolution: Optional[str] = None


class GeminiResult(BaseModel):
    text: str = ""
    raw: Dict[str, Any] = {}
