from fastapi import HTTPException


class InvalidInput(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=400, detail=detail)


class MissingCredentials(HTTPException):
    def __init__(self, detail: str = "Email and password are required"):
        super().__init__(status_code=400, detail=detail)


class DuplicateEmail(HTTPException):
    def __init__(self, detail: str = "Email already registered"):
        super().__init__(status_code=400, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Invalid or expired token"):
        super().__init__(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidCredential(HTTPException):
    def __init__(self, detail: str = "Invalid password"):
        super().__init__(status_code=401, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Unauthorized access"):
        super().__init__(status_code=403, detail=detail)


class UserNotFound(HTTPException):
    def __init__(self, detail: str = "User not found"):
        super().__init__(status_code=404, detail=detail)


class TaskNotFound(HTTPException):
    def __init__(self, detail: str = "Task not found"):
        super().__init__(status_code=404, detail=detail)


class ServerError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=500, detail=detail)
