from .catalog import SiteCatalog, WellSite
from .frames import TideFrame, WellFrame
from .profile import StudyProfile

__all__ = [
    "SiteCatalog",
    "WellSite",
    "TideFrame",
    "WellFrame",
    "StudyProfile",
]
