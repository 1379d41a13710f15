from flask import Blueprint, g, jsonify
from payportal.currency import format_amount
from payportal.security import login_required
from payportal.services.payment_service import ledger_for_user

users_bp = Blueprint('users', __name__)


@users_bp.route('/me', methods=['GET'])
@login_required
def get_own_profile():
    """
    Get the caller's profile
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: User profile
    """
    return jsonify(g.current_user.to_dict()), 200


@users_bp.route('/me/balance', methods=['GET'])
@login_required
def get_balance():
    """
    Current balance and transaction history
    Balance counts approved payments only.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: Balance in ZAR with the caller's transactions, newest first
    """
    balance, transactions = ledger_for_user(g.current_user.user_id)
    return jsonify({
        'balance': format_amount(balance),
        'currency': 'ZAR',
        'transactions': transactions,
    }), 200
