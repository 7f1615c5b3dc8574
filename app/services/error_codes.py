from enum import Enum


class ErrorCode(str, Enum):
    EMPTY_FIELDS = "EMPTY_FIELDS"
    INVALID_DATE = "INVALID_DATE"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_INPUT = "INVALID_INPUT"
    USER_EXISTS = "USER_EXISTS"
    EMAIL_IN_USE = "EMAIL_IN_USE"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    POST_NOT_FOUND = "POST_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"
    LIKE_NOT_FOUND = "LIKE_NOT_FOUND"
    FOLLOW_NOT_FOUND = "FOLLOW_NOT_FOUND"
    SELF_FOLLOW = "SELF_FOLLOW"
    ALREADY_FOLLOWING = "ALREADY_FOLLOWING"
    ALREADY_LIKED = "ALREADY_LIKED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# The only messages ever returned to clients
MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.EMPTY_FIELDS: "all required fields must be filled",
    ErrorCode.INVALID_DATE: "dateOfBirth must be an ISO date (YYYY-MM-DD)",
    ErrorCode.INVALID_EMAIL: "email address is not valid",
    ErrorCode.INVALID_INPUT: "request payload is invalid",
    ErrorCode.USER_EXISTS: "user already exists",
    ErrorCode.EMAIL_IN_USE: "email is already in use",
    ErrorCode.INVALID_CREDENTIALS: "invalid email or password",
    ErrorCode.UNAUTHENTICATED: "unauthorized",
    ErrorCode.FORBIDDEN: "no access",
    ErrorCode.USER_NOT_FOUND: "user not found",
    ErrorCode.POST_NOT_FOUND: "post not found",
    ErrorCode.COMMENT_NOT_FOUND: "comment not found",
    ErrorCode.LIKE_NOT_FOUND: "like not found",
    ErrorCode.FOLLOW_NOT_FOUND: "follow not found",
    ErrorCode.SELF_FOLLOW: "you cannot follow yourself",
    ErrorCode.ALREADY_FOLLOWING: "already following this user",
    ErrorCode.ALREADY_LIKED: "post already liked",
    ErrorCode.INTERNAL_ERROR: "internal server error",
}


def message_for(code: ErrorCode) -> str:
    return MESSAGES[code]
