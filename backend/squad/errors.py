# squad/errors.py

from fastapi import HTTPException, status

# Every failure a resource handler can produce. The app-level HTTPException
# handler renders each of them into the response envelope.

class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class AccessDenied(HTTPException):
    def __init__(self, detail: str = "Access Denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class BadRequest(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class NotImplementedFeature(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=detail)

class TransactionFailure(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class InternalError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
