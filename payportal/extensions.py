from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

db = SQLAlchemy()
jwt = JWTManager()

# Revoked token ids (jti). Single process only; use Redis with TTL when scaled out.
BLOCKLIST = set()
