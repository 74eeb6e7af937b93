"""
Member model.
"""
from datetime import datetime
from ..extensions import db


class Member(db.Model):
    """
    A registered member of the community.
    Linked to the login account created at registration (if any).
    """
    __tablename__ = 'members'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user_accounts.id', ondelete='SET NULL'), index=True)

    # Contact info
    email = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(500))
    state_of_residence = db.Column(db.String(100))
    phone_number = db.Column(db.String(50))

    # Church organization
    province = db.Column(db.String(100))
    region = db.Column(db.String(100))

    date_of_birth = db.Column(db.Date, nullable=False)
    profile_picture_url = db.Column(db.String(500))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    birthday_posts = db.relationship(
        'BirthdayPost',
        backref='member',
        cascade='all, delete-orphan',
    )

    # Fields an admin may change from the dashboard
    ADMIN_EDITABLE_FIELDS = (
        'full_name',
        'email',
        'address',
        'state_of_residence',
        'phone_number',
        'province',
        'region',
        'date_of_birth',
    )

    # Fields a member may change on their own profile
    SELF_EDITABLE_FIELDS = ('province', 'region')

    def __repr__(self):
        return f'<Member {self.id} {self.email}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'email': self.email,
            'full_name': self.full_name,
            'address': self.address,
            'state_of_residence': self.state_of_residence,
            'phone_number': self.phone_number,
            'province': self.province,
            'region': self.region,
            'date_of_birth': self.date_of_birth.isoformat() if self.date_of_birth else None,
            'profile_picture_url': self.profile_picture_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
