"""
Member views.

This module provides API views for:
- Registration
- Current member details

Related files:
    - serializers.py: Request/response serialization
    - services.py: MemberService
    - urls.py: URL routing (login/refresh come from SimpleJWT)
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import ConflictError, ValidationError
from members.serializers import MemberSerializer, RegisterSerializer
from members.services import MemberService


class RegisterView(APIView):
    """
    Register a new member.

    POST /api/v1/members/register/

    Request body:
        {
            "email": "ada@example.com",
            "password": "S3curePass!",
            "first_name": "Ada",
            "middle_name": "",
            "surname": "Obi",
            "matric_number": "CS/2021/001",
            "level": "nd1"
        }

    Returns:
        201 with the member, 409 if email or matric number is taken
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Register member",
        tags=["Members"],
        request=RegisterSerializer,
        responses={201: MemberSerializer},
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            member = MemberService.register(**serializer.validated_data)
        except ConflictError as e:
            return Response(e.to_dict(), status=status.HTTP_409_CONFLICT)
        except ValidationError as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        return Response(MemberSerializer(member).data, status=status.HTTP_201_CREATED)


class MeView(APIView):
    """
    Current member details.

    GET /api/v1/members/me/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get current member",
        tags=["Members"],
        responses={200: MemberSerializer},
    )
    def get(self, request):
        return Response(MemberSerializer(request.user).data)
