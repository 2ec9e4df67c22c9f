"""Deliveries blueprint: delivery partners browse, accept, and update shipments."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import BadRequest, Forbidden, NotFound

from models import db
from models.product import DELIVERY_STATUSES, Product
from models.user import User
from routes.products import get_product_or_404
from utils.auth import current_user_id, role_required
from utils.clock import utcnow
from utils.request_validation import parse_json_request

deliveries_bp = Blueprint("deliveries", __name__)


def _parse_price(value) -> Decimal:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, TypeError):
        price = None
    if price is None or not price.is_finite() or price <= 0:
        raise BadRequest("Valid offered price is required")
    return price


@deliveries_bp.route("/available", methods=["GET"])
@role_required("delivery")
def available_deliveries():
    products = (
        Product.query.filter(
            Product.status == "Pending",
            Product.delivery_partner_id.is_(None),
        )
        .order_by(Product.created_at.desc())
        .all()
    )
    return jsonify([product.to_dict() for product in products])


@deliveries_bp.route("/accept/<string:product_id>", methods=["POST"])
@role_required("delivery", "Only delivery partners can accept deliveries")
def accept_delivery(product_id: str):
    """Assign an open shipment to the caller at their offered price."""

    data = parse_json_request(request, allow_empty=True)
    price = _parse_price(data.get("offeredPrice"))

    user = db.session.get(User, current_user_id())
    if user is None:
        raise NotFound("User not found")

    product = get_product_or_404(product_id)
    if product.status != "Pending":
        raise BadRequest("Product is no longer available")
    if product.delivery_partner_id:
        raise BadRequest("Delivery already accepted by another partner")

    # Only one concurrent acceptance can match the open-state filter.
    claimed = (
        Product.query.filter(
            Product.id == product.id,
            Product.status == "Pending",
            Product.delivery_partner_id.is_(None),
        )
        .update(
            {
                Product.delivery_partner_id: user.id,
                Product.delivery_partner_name: user.name,
                Product.delivery_partner_price: price,
                Product.status: "Accepted",
                Product.updated_at: utcnow(),
            },
            synchronize_session=False,
        )
    )
    if claimed != 1:
        db.session.rollback()
        raise BadRequest("Delivery already accepted by another partner")
    db.session.commit()

    db.session.refresh(product)
    return jsonify({"message": "Delivery accepted successfully", "product": product.to_dict()})


@deliveries_bp.route("/my-deliveries", methods=["GET"])
@role_required("delivery")
def my_deliveries():
    deliveries = (
        Product.query.filter_by(delivery_partner_id=current_user_id())
        .order_by(Product.created_at.desc())
        .all()
    )
    return jsonify([product.to_dict() for product in deliveries])


@deliveries_bp.route("/<string:product_id>/status", methods=["PUT"])
@jwt_required()
def update_delivery_status(product_id: str):
    product = get_product_or_404(product_id)
    if not product.delivery_partner_id or product.delivery_partner_id != current_user_id():
        raise Forbidden("Access denied")

    data = parse_json_request(request)
    status = data.get("status")
    if status and status not in DELIVERY_STATUSES:
        raise BadRequest("Invalid status")

    if status:
        product.status = status
    if data.get("currentLocation"):
        product.current_location = str(data["currentLocation"]).strip()
    db.session.commit()

    return jsonify({"message": "Delivery status updated successfully", "product": product.to_dict()})
