"""
Members application.

Department members are the people who owe fees. This app owns their
identity (custom user model), registration with unique email and matric
number, and JWT login.

Key components:
    - Member model: Email-based custom user with academic details
    - MemberService: Registration business logic
    - Views: register, login (SimpleJWT), current member

Usage:
    from members.models import Member
    from members.services import MemberService
"""
