"""Order database model."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Enum, Index, String, UniqueConstraint, text
from sqlmodel import Field, SQLModel
from ulid import ULID

from pizzaparty.models.enums import OrderStatus
from pizzaparty.models.types import ULIDType

DESCRIPTION_MAX_LENGTH = 255


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def _ulid() -> str:
    """Generate a new ULID string."""
    return str(ULID())


# Named so conflict detection can tell a code collision from other integrity errors
ORDER_CODE_CONSTRAINT = UniqueConstraint("code", name="uq_orders_code")

# At most one row may hold the preparation slot, across all processes
SINGLE_PREPARING_INDEX = Index(
    "uq_orders_single_preparing",
    "status",
    unique=True,
    postgresql_where=text("status = 'preparing'"),
    sqlite_where=text("status = 'preparing'"),
)


class Order(SQLModel, table=True):
    """Pizza order placed by a customer."""

    __tablename__ = "orders"
    __table_args__ = (ORDER_CODE_CONSTRAINT, SINGLE_PREPARING_INDEX)

    # ULID stored as UUID
    id: str = Field(
        default_factory=_ulid,
        max_length=26,
        sa_column=Column(ULIDType, primary_key=True),
    )

    # Display code, e.g. "COD-21032025-0007"; never changes once assigned
    code: str = Field(sa_column=Column(String(32), nullable=False))

    description: str = Field(sa_column=Column(String(DESCRIPTION_MAX_LENGTH), nullable=False))
    status: OrderStatus = Field(
        default=OrderStatus.WAITING,
        sa_column=Column(
            Enum(
                OrderStatus,
                values_callable=lambda e: [x.value for x in e],
                name="orderstatus",
                native_enum=False,
                length=16,
            ),
            nullable=False,
            index=True,
        ),
    )
    created_at: datetime = Field(default_factory=_utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=_utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
