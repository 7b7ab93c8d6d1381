# src/jti_store/models/jti.py
"""Model recording JWT IDs already used for client authentication."""

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from jti_store.db.session import Base
from jti_store.db.time import UTCDateTime

JTI_MAX_LENGTH = 255


class JTIEntry(Base):
    """A JWT ID seen in an accepted assertion.

    Existence of a row means the JTI has been used. Rows are removed by the
    purge job once ``exp_time`` has passed.
    """

    __tablename__ = "idn_oidc_jti"

    jwt_id: Mapped[str] = mapped_column(String(JTI_MAX_LENGTH), primary_key=True)
    exp_time: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
    time_created: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
