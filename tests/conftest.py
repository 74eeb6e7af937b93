"""
Shared pytest fixtures for the member portal.
"""
import uuid
from datetime import date

import pytest

from portal import create_app
from portal.extensions import db


@pytest.fixture
def app(tmp_path):
    """App with an in-memory database and a throwaway upload folder."""
    app = create_app('testing', {'UPLOAD_FOLDER': str(tmp_path / 'uploads')})

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_member(app):
    """Factory creating an account plus member row."""
    from portal.models import Member
    from portal.services import auth_service

    def _make_member(full_name='Test User', date_of_birth=date(1990, 6, 15), with_account=True, **fields):
        unique_id = str(uuid.uuid4())[:8]
        email = fields.pop('email', f'member-{unique_id}@example.com')

        account = None
        if with_account:
            account = auth_service.create_account(email, 'secret123')

        member = Member(
            user_id=account.id if account else None,
            email=email,
            full_name=full_name,
            address=fields.pop('address', '1 Church Road'),
            state_of_residence=fields.pop('state_of_residence', 'Lagos'),
            phone_number=fields.pop('phone_number', f'080{unique_id[:6]}'),
            province=fields.pop('province', 'Lagos Province 1'),
            region=fields.pop('region', 'Region 1'),
            date_of_birth=date_of_birth,
            **fields
        )
        db.session.add(member)
        db.session.commit()
        return member

    return _make_member


@pytest.fixture
def sample_member(make_member):
    return make_member()


def _headers_for(account):
    from portal.services import auth_service
    return {
        'Authorization': f'Bearer {auth_service.issue_token(account)}',
        'Content-Type': 'application/json',
    }


@pytest.fixture
def member_headers(sample_member):
    from portal.models import UserAccount
    account = db.session.get(UserAccount, sample_member.user_id)
    return _headers_for(account)


@pytest.fixture
def admin_account(app):
    from portal.services import auth_service
    account = auth_service.create_account('admin@example.org', 'adminpass')
    auth_service.grant_admin(account)
    db.session.commit()
    return account


@pytest.fixture
def admin_headers(admin_account):
    return _headers_for(admin_account)
