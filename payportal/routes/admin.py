import uuid
from flask import Blueprint, current_app, g, request, jsonify
from payportal.extensions import db
from payportal.routes.validation import validate_account
from payportal.security import admin_required
from payportal.services.payment_service import list_pending, resolve_payment
from payportal.services.user_service import account_exists, create_user

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/payments/pending', methods=['GET'])
@admin_required
def pending_payments():
    """
    List payments awaiting a decision
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    responses:
      200:
        description: Pending payments, oldest first
      403:
        description: Caller is not an admin
    """
    return jsonify([p.to_dict() for p in list_pending()]), 200


def _resolve(transaction_id, new_status):
    try:
        tx_id = uuid.UUID(transaction_id)
    except ValueError:
        return jsonify({'error': 'Payment not found'}), 404

    try:
        payment, error = resolve_payment(tx_id, new_status, g.current_user.user_id)
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Failed to resolve payment %s", transaction_id)
        return jsonify({'error': str(e)}), 500

    if error:
        status_code = 404 if "not found" in error else 409
        return jsonify({'error': error}), status_code

    return jsonify(payment.to_dict()), 200


@admin_bp.route('/payments/<transaction_id>/approve', methods=['POST'])
@admin_required
def approve_payment(transaction_id):
    """
    Approve a pending payment
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    parameters:
      - in: path
        name: transaction_id
        required: true
        type: string
    responses:
      200:
        description: Payment approved
      403:
        description: Caller is not an admin
      404:
        description: Payment not found
      409:
        description: Payment already approved or rejected
    """
    return _resolve(transaction_id, "approved")


@admin_bp.route('/payments/<transaction_id>/reject', methods=['POST'])
@admin_required
def reject_payment(transaction_id):
    """
    Reject a pending payment
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    parameters:
      - in: path
        name: transaction_id
        required: true
        type: string
    responses:
      200:
        description: Payment rejected
      403:
        description: Caller is not an admin
      404:
        description: Payment not found
      409:
        description: Payment already approved or rejected
    """
    return _resolve(transaction_id, "rejected")


@admin_bp.route('/add-admin', methods=['POST'])
@admin_required
def add_admin():
    """
    Create another administrator account
    ---
    tags:
      - Admin
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
            - surname
            - idNumber
            - email
            - password
          properties:
            name:
              type: string
            surname:
              type: string
            idNumber:
              type: string
            email:
              type: string
            password:
              type: string
    responses:
      201:
        description: Admin created
      400:
        description: Missing or invalid fields
      403:
        description: Caller is not an admin
      409:
        description: Email or ID number already registered
    """
    data = request.get_json(silent=True) or {}
    error = validate_account(data)
    if error:
        return jsonify({'error': error}), 400

    if account_exists(data['email'], data['idNumber']):
        return jsonify({'error': 'Email or ID number already registered'}), 409

    try:
        admin = create_user(
            data['name'], data['surname'], data['idNumber'], data['email'], data['password'],
            role='admin',
        )
    except Exception as e:
        current_app.logger.exception("Failed to add admin")
        return jsonify({'error': 'Database error', 'details': str(e)}), 500

    current_app.logger.info("Admin %s added by %s", admin.email, g.current_user.email)
    return jsonify({'message': 'Admin added successfully', 'user': admin.to_dict()}), 201
