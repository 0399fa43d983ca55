"""ORM Models — SQLAlchemy declarative models.

Design Decisions:
    - Models imported here so Base.metadata is populated by a single import
"""

from waitlist_api.models.entrant import Entrant  # noqa: F401
