"""
Birthday posts shown on the dashboard.
"""
from datetime import datetime
from ..extensions import db


class BirthdayPost(db.Model):
    """
    A birthday greeting recorded for a member.
    automated marks greetings sent by the daily job. posted_by_admin_id can
    also be NULL for admin posts whose admin was later removed.
    """
    __tablename__ = 'birthday_posts'

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(
        db.Integer,
        db.ForeignKey('members.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    post_content = db.Column(db.Text, nullable=False)
    posted_by_admin_id = db.Column(db.Integer, db.ForeignKey('admins.id', ondelete='SET NULL'))
    automated = db.Column(db.Boolean, nullable=False, default=False, index=True)
    posted_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<BirthdayPost {self.id} member={self.member_id}>'

    @property
    def is_automated(self) -> bool:
        return bool(self.automated)

    def to_dict(self):
        return {
            'id': self.id,
            'member_id': self.member_id,
            'post_content': self.post_content,
            'posted_by_admin_id': self.posted_by_admin_id,
            'posted_at': self.posted_at.isoformat() if self.posted_at else None,
            'automated': self.is_automated,
            'members': {
                'full_name': self.member.full_name if self.member else None,
            },
        }
