from typing import Dict, NoReturn

from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


# Status for every error code a use case can return
ERROR_STATUS_CODES: Dict[str, int] = {
    "TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NO_ROLE_CONTEXT": status.HTTP_404_NOT_FOUND,
    "NO_CURRENT_TENANT": status.HTTP_409_CONFLICT,
    "NOT_SUPER_ADMIN": status.HTTP_403_FORBIDDEN,
    "INVALID_PAGINATION": status.HTTP_400_BAD_REQUEST,
}


def raise_for_error(error: Error) -> NoReturn:
    """Raise the API error matching a use case error; unknown codes are server errors."""
    status_code = ERROR_STATUS_CODES.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
