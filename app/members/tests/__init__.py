"""
Tests for members app.

This package contains test modules for:
- test_managers.py: MemberManager tests
- test_models.py: Member model tests
- test_services.py: MemberService tests
- test_views.py: API endpoint tests

Usage:
    pytest members/tests/
"""
