from rest_framework import status

from core.exceptions import ConflictError, ServiceError


class EmailTaken(ConflictError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "An account with this email already exists."
    default_code = "email_taken"


class InvalidCredentials(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid email or password."
    default_code = "invalid_credentials"
