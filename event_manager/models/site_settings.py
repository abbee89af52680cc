from sqlalchemy import Column, Integer, String, Text

from ..core.database_manager import Base

SINGLETON_SETTING_ID = 1


class SiteSettings(Base):
    __tablename__ = "site_settings"

    setting_id = Column(Integer, primary_key=True)
    site_name = Column(String(200), nullable=False)
    site_description = Column(Text, nullable=False)
