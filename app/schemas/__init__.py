"""Pydantic schemas for request/response validation.

Wire format is camelCase (``galleryImages``, ``formSectionId``); Python
attributes stay snake_case. Required business inputs are declared optional
here and checked by the services, so a missing title is a 400 with a clear
message rather than a generic 422.
"""

from app.schemas.base import *  # noqa: F401,F403
from app.schemas.accounts import *  # noqa: F401,F403
from app.schemas.college import *  # noqa: F401,F403
from app.schemas.forms import *  # noqa: F401,F403
from app.schemas.faq import *  # noqa: F401,F403
