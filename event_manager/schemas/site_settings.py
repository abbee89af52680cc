from typing import Optional

from pydantic import BaseModel, ConfigDict


class SiteSettings(BaseModel):
    site_name: str
    site_description: str

    model_config = ConfigDict(from_attributes=True)


DEFAULT_SITE_SETTINGS = SiteSettings(
    site_name="Event Manager", site_description="Book your events"
)


def resolve_site_settings(settings: Optional[SiteSettings]) -> SiteSettings:
    """Apply the display default when no settings row has been written yet"""
    return settings if settings is not None else DEFAULT_SITE_SETTINGS
