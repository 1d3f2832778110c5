"""User model definition.
This module defines the User ORM model: identity, hashed credentials,
single-use verification/reset tokens and communication consent.
"""
from datetime import datetime

from extensions import db, bcrypt

USER_TYPES = ('parent', 'provider', 'employer', 'employee')


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Profile information
    first_name = db.Column(db.String(100), default='User')
    last_name = db.Column(db.String(100), default='')
    user_type = db.Column(db.String(20), nullable=False, default='parent', index=True)
    phone = db.Column(db.String(30), default='')
    address = db.Column(db.String(255), default='')
    children = db.Column(db.JSON, default=list)
    daycare_id = db.Column(db.String(64))
    role = db.Column(db.String(64))
    profile_complete = db.Column(db.Boolean, default=False, nullable=False)

    # Account state
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    last_login = db.Column(db.DateTime)

    # Communication consent
    email_consent = db.Column(db.Boolean, default=True, nullable=False)
    sms_consent = db.Column(db.Boolean, default=False, nullable=False)
    promotional_consent = db.Column(db.Boolean, default=False, nullable=False)
    acknowledgement = db.Column(db.Boolean, default=False, nullable=False)

    # Email verification
    email_verified = db.Column(db.Boolean, default=False, nullable=False)
    email_verification_token = db.Column(db.String(64), index=True)
    email_verification_expires = db.Column(db.DateTime)

    # Password reset
    reset_password_token = db.Column(db.String(64), index=True)
    reset_password_expires = db.Column(db.DateTime)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def update_profile_complete(self):
        """Recompute profile completeness from the account type."""
        user_type = self.user_type or 'parent'
        if user_type == 'parent':
            self.profile_complete = bool(self.children)
        elif user_type == 'provider':
            self.profile_complete = bool(self.daycare_id)
        else:
            self.profile_complete = True
        return self.profile_complete

    def set_verification_token(self, token, expires_at):
        self.email_verification_token = token
        self.email_verification_expires = expires_at

    def clear_verification_token(self):
        self.email_verification_token = None
        self.email_verification_expires = None

    def set_reset_token(self, token, expires_at):
        self.reset_password_token = token
        self.reset_password_expires = expires_at

    def clear_reset_token(self):
        self.reset_password_token = None
        self.reset_password_expires = None

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'userType': self.user_type,
            'phone': self.phone,
            'address': self.address,
            'children': self.children or [],
            'daycareId': self.daycare_id,
            'role': self.role,
            'profileComplete': self.profile_complete,
            'isActive': self.is_active,
            'emailVerified': self.email_verified,
            'communicationPreferences': {
                'email': self.email_consent,
                'sms': self.sms_consent,
                'promotional': self.promotional_consent,
                'acknowledgement': self.acknowledgement,
            },
            'lastLogin': self.last_login.isoformat() if self.last_login else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<User {self.email}>'
