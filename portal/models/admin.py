"""
Admin and AdminSettings models.
"""
from datetime import datetime
from ..extensions import db


class Admin(db.Model):
    """Grants dashboard access to a login account."""
    __tablename__ = 'admins'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey('user_accounts.id', ondelete='CASCADE'),
        nullable=False,
        unique=True,
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    account = db.relationship('UserAccount', backref=db.backref('admin', uselist=False, cascade='all, delete-orphan'))

    def __repr__(self):
        return f'<Admin {self.id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'email': self.account.email if self.account else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class AdminSettings(db.Model):
    """
    Dashboard-wide settings.
    Only one row is ever used; see AdminSettings.get().
    """
    __tablename__ = 'admin_settings'

    id = db.Column(db.Integer, primary_key=True)
    notification_email = db.Column(db.String(255))
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @staticmethod
    def get():
        """Return the settings row, or None if nothing was saved yet."""
        return AdminSettings.query.order_by(AdminSettings.id).first()

    def to_dict(self):
        return {
            'notification_email': self.notification_email,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
