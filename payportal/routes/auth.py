from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import create_access_token, get_jwt, jwt_required
from payportal.extensions import BLOCKLIST
from payportal.routes.validation import validate_account
from payportal.services.user_service import account_exists, create_user, get_user_by_email

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    """
    Register a new user
    ---
    tags:
      - Auth
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
        description: User registered
      400:
        description: Missing or invalid fields
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
        user = create_user(
            data['name'], data['surname'], data['idNumber'], data['email'], data['password'],
        )
    except Exception as e:
        current_app.logger.exception("Registration failed")
        return jsonify({'error': 'Database error', 'details': str(e)}), 500

    return jsonify({'message': 'User registered successfully', 'user': user.to_dict()}), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Authenticate user and return a bearer token
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - email
            - password
          properties:
            email:
              type: string
            password:
              type: string
    responses:
      200:
        description: Login successful
      401:
        description: Invalid credentials
    """
    data = request.get_json(silent=True) or {}
    if not data.get('email') or not data.get('password'):
        return jsonify({'error': 'Missing email or password'}), 400

    user = get_user_by_email(data['email'])

    if user and user.check_password(data['password']):
        token = create_access_token(
            identity=str(user.user_id),
            additional_claims={'role': user.role},
        )
        return jsonify({
            'message': 'Login successful',
            'token': token,
            'user': user.to_dict()
        }), 200

    return jsonify({'error': 'Invalid email or password'}), 401


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """
    Logout user (revoke token)
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logout successful
    """
    BLOCKLIST.add(get_jwt()['jti'])
    return jsonify({'message': 'Logout successful'}), 200
