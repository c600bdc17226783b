from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from shared.core.config import settings
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode

security = HTTPBearer()


def verify_token(token: str) -> UserToken:
    """Decode a JWT issued by the business auth service."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        user = UserToken(**payload)
    except (JWTError, PydanticValidationError):
        return error_response(
            message="Invalid or expired token",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED,
            http_status=401,
            headers={"WWW-Authenticate": "Bearer"}
        )

    if not user.business_id:
        return error_response(
            message="Business ID not found",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_INVALID,
            http_status=400
        )
    return user


def validate_current_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    return verify_token(credentials.credentials)
