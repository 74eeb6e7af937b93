"""
Database models for the member portal.
"""
from .account import UserAccount
from .member import Member
from .admin import Admin, AdminSettings
from .birthday_post import BirthdayPost

__all__ = [
    'UserAccount',
    'Member',
    'Admin',
    'AdminSettings',
    'BirthdayPost',
]
