# Import all models for easier access
from .booking import Booking  # noqa: F401
from .event import Event, EventStatus  # noqa: F401
from .organiser import Organiser  # noqa: F401
from .site_settings import SiteSettings  # noqa: F401
