"""Product (shipment request) model."""

import uuid
from decimal import Decimal

from utils.clock import isoformat, utcnow

from . import db

PRODUCT_STATUSES = ("Pending", "Accepted", "In Transit", "Delivered", "Cancelled")
DELIVERY_STATUSES = ("Accepted", "In Transit", "Delivered", "Cancelled")


def _as_float(value):
    return float(value) if isinstance(value, Decimal) else value


class Product(db.Model):
    """A shipment posted by an entrepreneur and optionally taken by a delivery partner."""

    __tablename__ = "products"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    entrepreneur_id = db.Column(
        db.String(36), db.ForeignKey("users.id"), nullable=False, index=True
    )
    entrepreneur_name = db.Column(db.String(120), nullable=False)
    product_name = db.Column(db.String(200), nullable=False)
    quantity = db.Column(db.String(64), nullable=False)
    weight = db.Column(db.Float, nullable=False)
    cost = db.Column(db.Numeric(12, 2), nullable=False)
    from_location = db.Column(db.String(255), nullable=False)
    to_location = db.Column(db.String(255), nullable=False)
    status = db.Column(
        db.Enum(*PRODUCT_STATUSES, name="product_status_enum"),
        nullable=False,
        default="Pending",
        index=True,
    )
    current_location = db.Column(db.String(255), nullable=True)
    delivery_partner_id = db.Column(
        db.String(36), db.ForeignKey("users.id"), nullable=True, index=True
    )
    delivery_partner_name = db.Column(db.String(120), nullable=True)
    delivery_partner_price = db.Column(db.Numeric(12, 2), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_open(self) -> bool:
        return self.status == "Pending" and self.delivery_partner_id is None

    def to_dict(self) -> dict:
        """Serialize the product."""

        return {
            "id": self.id,
            "entrepreneurId": self.entrepreneur_id,
            "entrepreneurName": self.entrepreneur_name,
            "productName": self.product_name,
            "quantity": self.quantity,
            "weight": self.weight,
            "cost": _as_float(self.cost),
            "fromLocation": self.from_location,
            "toLocation": self.to_location,
            "status": self.status,
            "currentLocation": self.current_location,
            "deliveryPartnerId": self.delivery_partner_id,
            "deliveryPartnerName": self.delivery_partner_name,
            "deliveryPartnerPrice": _as_float(self.delivery_partner_price),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
