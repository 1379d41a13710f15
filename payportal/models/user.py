import uuid
import bcrypt
from datetime import datetime, timezone
from payportal.extensions import db

ROLES = ("user", "admin")


class User(db.Model):
    __tablename__ = 'users'

    user_id = db.Column(db.UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = db.Column(db.String(100), nullable=False)
    surname = db.Column(db.String(100), nullable=False)
    id_number = db.Column(db.String(13), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.Text, nullable=False)
    role = db.Column(db.Enum(*ROLES, name='user_role'), nullable=False, default='user')
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )

    def set_password(self, password):
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password):
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    @property
    def is_admin(self):
        return self.role == 'admin'

    def to_summary(self):
        # Shape embedded in transactions as sender / recipient
        return {
            'id': str(self.user_id),
            'name': f"{self.name} {self.surname}",
            'email': self.email,
        }

    def to_dict(self):
        return {
            'id': str(self.user_id),
            'name': self.name,
            'surname': self.surname,
            'email': self.email,
            'role': self.role,
        }
