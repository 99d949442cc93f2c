"""Site settings (homepage, about, social, contact, seo, legal) stored as JSON per key."""
import re

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from arivelab.database import get_db
from arivelab.models.site_setting import SiteSetting
from arivelab.models.user import User
from arivelab.schemas.settings import SiteSettingResponse, SiteSettingUpdate
from arivelab.services.audit_log import create_log, request_context, CATEGORY_SETTINGS
from arivelab.services.capabilities import Capability
from arivelab.dependencies import require_capability

router = APIRouter(prefix="/settings", tags=["settings"])

KEY_PATTERN = re.compile(r"^[a-z][a-z0-9_-]{0,63}$")


@router.get("/{key}", response_model=SiteSettingResponse)
def get_setting(key: str, db: Session = Depends(get_db)):
    setting = db.query(SiteSetting).filter(SiteSetting.key == key).first()
    if not setting:
        raise HTTPException(status_code=404, detail="Setting not found")
    return SiteSettingResponse.model_validate(setting)


@router.put("/{key}", response_model=SiteSettingResponse)
def put_setting(
    request: Request,
    key: str,
    data: SiteSettingUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_capability(Capability.manage_site_settings)),
):
    if not KEY_PATTERN.match(key):
        raise HTTPException(status_code=400, detail="Invalid setting key")
    setting = db.query(SiteSetting).filter(SiteSetting.key == key).first()
    if setting:
        setting.value = data.value
    else:
        setting = SiteSetting(key=key, value=data.value)
        db.add(setting)
    create_log(
        db,
        CATEGORY_SETTINGS,
        "Site setting saved",
        f"{admin.email} saved setting '{key}'.",
        actor_user_id=admin.id,
        actor_email=admin.email,
        meta={"key": key},
        **request_context(request),
    )
    db.commit()
    db.refresh(setting)
    return SiteSettingResponse.model_validate(setting)
