from flask import Blueprint, current_app, g, request, jsonify
from payportal.currency import convert, parse_amount, rate_for
from payportal.errors import ValidationError
from payportal.extensions import db
from payportal.routes.validation import missing_fields
from payportal.security import login_required
from payportal.services.payment_service import create_payment, get_payments_for_user
from payportal.services.user_service import get_user_by_email

payments_bp = Blueprint('payments', __name__)

REQUIRED_FIELDS = ['recipientEmail', 'swiftCode', 'amount', 'currency']


@payments_bp.route('', methods=['POST'])
@login_required
def submit_payment():
    """
    Submit a payment request for admin approval
    ---
    tags:
      - Payments
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - recipientEmail
            - swiftCode
            - amount
            - currency
          properties:
            recipientEmail:
              type: string
            swiftCode:
              type: string
            amount:
              type: number
              description: Amount already converted to ZAR
            currency:
              type: string
              enum: [USD, EUR, GBP, ZAR]
            originalAmount:
              type: number
              description: Amount as entered, in the original currency
    responses:
      201:
        description: Pending payment created
      400:
        description: Invalid input
      404:
        description: Recipient not found
    """
    data = request.get_json(silent=True) or {}

    missing = missing_fields(data, REQUIRED_FIELDS)
    if missing:
        return jsonify({'error': f"Missing fields: {', '.join(missing)}"}), 400

    try:
        currency = str(data['currency']).strip()
        rate_for(currency)
        amount = parse_amount(data['amount'], cents=True)
        original_amount = None
        if data.get('originalAmount') is not None:
            original_amount = parse_amount(data['originalAmount'], cents=True)
            expected = convert(currency, original_amount)
            if amount != expected:
                return jsonify({
                    'error': f"Amount {amount} ZAR does not match {original_amount} {currency} "
                             f"converted at the fixed rate ({expected} ZAR)"
                }), 400
    except ValidationError as e:
        return jsonify({'error': e.message}), 400

    sender = g.current_user
    recipient = get_user_by_email(data['recipientEmail'])
    if not recipient:
        return jsonify({'error': 'Recipient not found'}), 404

    if recipient.user_id == sender.user_id:
        return jsonify({'error': 'Cannot send a payment to yourself'}), 400

    try:
        payment = create_payment(
            sender=sender,
            recipient=recipient,
            amount=amount,
            original_currency=currency,
            original_amount=original_amount,
            swift_code=str(data['swiftCode']).strip(),
        )
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Failed to create payment")
        return jsonify({'error': str(e)}), 500

    return jsonify(payment.to_dict(viewer_id=sender.user_id)), 201


@payments_bp.route('/history', methods=['GET'])
@login_required
def payment_history():
    """
    Payments sent or received by the caller, newest first
    ---
    tags:
      - Payments
    security:
      - Bearer: []
    responses:
      200:
        description: List of transactions
    """
    user_id = g.current_user.user_id
    payments = get_payments_for_user(user_id)
    return jsonify([p.to_dict(viewer_id=user_id) for p in payments]), 200
