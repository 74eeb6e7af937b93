"""
Business logic services for the member portal.
"""
