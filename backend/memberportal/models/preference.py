"""
Preference Model
================

Named settings per organization, stored as strings.
"""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from memberportal.db.base import Base


class Preference(Base):
    """
    Organization preference.

    Attributes:
        id: Integer primary key
        organization_id: Owning organization
        name: Preference name, e.g. system_search_similar
        value: Preference value as string
    """

    __tablename__ = "adm_preferences"

    id: Mapped[int] = mapped_column("prf_id", Integer, primary_key=True, autoincrement=True)

    organization_id: Mapped[int] = mapped_column(
        "prf_org_id",
        Integer,
        ForeignKey("adm_organizations.org_id", ondelete="CASCADE"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column("prf_name", String(50), nullable=False)

    value: Mapped[Optional[str]] = mapped_column("prf_value", String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint("prf_org_id", "prf_name", name="uq_preferences_org_name"),
    )

    def __repr__(self) -> str:
        return f"<Preference(name={self.name}, value={self.value})>"
