from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import AccountSerializer, LoginSerializer, ProfileSerializer, RegistrationSerializer
from .services.identity import authenticate_email, issue_tokens, register_user, update_profile


def _session(user):
    return {"user": AccountSerializer(user).data, "tokens": issue_tokens(user)}


class RegisterView(APIView):
    # A stale bearer token must not block signing up or in.
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = register_user(**serializer.validated_data)
        return Response(_session(user), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = authenticate_email(serializer.validated_data["email"], serializer.validated_data["password"])
        return Response(_session(user))


class MeView(APIView):
    def get(self, request):
        return Response(AccountSerializer(request.user).data)

    def patch(self, request):
        serializer = ProfileSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = update_profile(request.user, serializer.validated_data)
        return Response(AccountSerializer(user).data)

    put = patch
