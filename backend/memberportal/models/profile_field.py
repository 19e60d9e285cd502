"""
Profile Field Models
====================

Profile fields are configurable per organization. Their values are
stored in one generic table instead of fixed user columns.

- ProfileField: definition (adm_user_fields)
- UserData: value of one field for one user (adm_user_data)
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column

from memberportal.db.base import Base

if TYPE_CHECKING:
    from memberportal.models.user import User


class ProfileField(Base):
    """
    Profile field definition.

    A field with organization_id NULL is shared by all organizations;
    an organization may override it with its own definition.

    Attributes:
        id: Integer primary key
        organization_id: Owning organization or None for shared fields
        name_intern: Internal name, e.g. LAST_NAME
        name: Display name
        type: Field type, e.g. TEXT or EMAIL
    """

    __tablename__ = "adm_user_fields"

    id: Mapped[int] = mapped_column("usf_id", Integer, primary_key=True, autoincrement=True)

    organization_id: Mapped[Optional[int]] = mapped_column(
        "usf_org_id",
        Integer,
        ForeignKey("adm_organizations.org_id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    name_intern: Mapped[str] = mapped_column("usf_name_intern", String(110), nullable=False, index=True)

    name: Mapped[str] = mapped_column("usf_name", String(100), nullable=False)

    type: Mapped[str] = mapped_column("usf_type", String(30), nullable=False, default="TEXT")

    __table_args__ = (
        UniqueConstraint("usf_org_id", "usf_name_intern", name="uq_user_fields_org_name"),
    )

    def __repr__(self) -> str:
        return f"<ProfileField(id={self.id}, name_intern={self.name_intern})>"


class UserData(Base):
    """
    Value of a profile field for a user.

    Attributes:
        id: Integer primary key
        user_id: Owner of the value
        field_id: Profile field definition
        value: Stored value
    """

    __tablename__ = "adm_user_data"

    id: Mapped[int] = mapped_column("usd_id", Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        "usd_usr_id",
        Integer,
        ForeignKey("adm_users.usr_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    field_id: Mapped[int] = mapped_column(
        "usd_usf_id",
        Integer,
        ForeignKey("adm_user_fields.usf_id", ondelete="CASCADE"),
        nullable=False,
    )

    value: Mapped[Optional[str]] = mapped_column("usd_value", String(4000), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="data")

    __table_args__ = (
        UniqueConstraint("usd_usr_id", "usd_usf_id", name="uq_user_data_usr_usf"),
    )
