"""Products blueprint: shipment requests posted by entrepreneurs."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import BadRequest, Forbidden, NotFound

from models import db
from models.product import PRODUCT_STATUSES, Product
from models.user import User
from utils.auth import current_role, current_user_id, role_required
from utils.request_validation import parse_json_request

products_bp = Blueprint("products", __name__)

REQUIRED_FIELDS = ("productName", "quantity", "weight", "cost", "fromLocation", "toLocation")


def get_product_or_404(product_id: str) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


def _can_view_product(product: Product, user_id: str, role: str | None) -> bool:
    if user_id in (product.entrepreneur_id, product.delivery_partner_id):
        return True
    return role == "delivery" and product.is_open


def _can_modify_product(product: Product, user_id: str) -> bool:
    return user_id in (product.entrepreneur_id, product.delivery_partner_id)


def _parse_positive_number(value, field: str, errors: list[str]):
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError):
        errors.append(f"{field} must be numeric")
        return None
    if not number.is_finite() or number <= 0:
        errors.append(f"{field} must be greater than zero")
        return None
    return number


@products_bp.route("", methods=["POST"])
@role_required("entrepreneur", "Only entrepreneurs can create products")
def create_product():
    """Create a shipment request for the calling entrepreneur."""

    user = db.session.get(User, current_user_id())
    if user is None:
        raise NotFound("User not found")

    data = parse_json_request(request)
    missing = [field for field in REQUIRED_FIELDS if data.get(field) in (None, "")]
    if missing:
        raise BadRequest("All fields are required")

    errors: list[str] = []
    weight = _parse_positive_number(data.get("weight"), "weight", errors)
    cost = _parse_positive_number(data.get("cost"), "cost", errors)
    if errors:
        raise BadRequest("; ".join(errors))

    product = Product(
        entrepreneur_id=user.id,
        entrepreneur_name=user.name,
        product_name=str(data["productName"]).strip(),
        quantity=str(data["quantity"]).strip(),
        weight=float(weight),
        cost=cost,
        from_location=str(data["fromLocation"]).strip(),
        to_location=str(data["toLocation"]).strip(),
        current_location=str(data["fromLocation"]).strip(),
    )
    db.session.add(product)
    db.session.commit()

    return jsonify({"message": "Product created successfully", "product": product.to_dict()}), 201


@products_bp.route("/my-products", methods=["GET"])
@role_required("entrepreneur")
def my_products():
    products = (
        Product.query.filter_by(entrepreneur_id=current_user_id())
        .order_by(Product.created_at.desc())
        .all()
    )
    return jsonify([product.to_dict() for product in products])


@products_bp.route("/<string:product_id>", methods=["GET"])
@jwt_required()
def get_product(product_id: str):
    product = get_product_or_404(product_id)
    if not _can_view_product(product, current_user_id(), current_role()):
        raise Forbidden("Access denied")
    return jsonify(product.to_dict())


@products_bp.route("/<string:product_id>", methods=["PUT"])
@jwt_required()
def update_product(product_id: str):
    """Update status or current location as the owner or the assigned partner."""

    product = get_product_or_404(product_id)
    if not _can_modify_product(product, current_user_id()):
        raise Forbidden("Access denied")

    data = parse_json_request(request)
    status = data.get("status")
    if status and status not in PRODUCT_STATUSES:
        raise BadRequest("Invalid status")

    if status:
        product.status = status
    if data.get("currentLocation"):
        product.current_location = str(data["currentLocation"]).strip()
    db.session.commit()

    return jsonify({"message": "Product updated successfully", "product": product.to_dict()})


@products_bp.route("/<string:product_id>", methods=["DELETE"])
@jwt_required()
def delete_product(product_id: str):
    product = get_product_or_404(product_id)
    if product.entrepreneur_id != current_user_id():
        raise Forbidden("Access denied")
    if product.delivery_partner_id:
        raise BadRequest("Cannot delete product with assigned delivery partner")

    db.session.delete(product)
    db.session.commit()
    return jsonify({"message": "Product deleted successfully"})
