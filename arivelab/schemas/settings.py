from datetime import datetime
from pydantic import BaseModel


class SiteSettingUpdate(BaseModel):
    value: dict


class SiteSettingResponse(BaseModel):
    key: str
    value: dict
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
