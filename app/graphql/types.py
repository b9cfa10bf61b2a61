"""GraphQL object and input types, response envelopes and Result-to-envelope mapping."""

from datetime import datetime

import strawberry

from app.models import DirectMessage, User, UserRole
from app.services.result import Err, Ok, Result

strawberry.enum(UserRole, name="UserRole")


def _iso(value: datetime | None) -> str:
    return value.isoformat() if value is not None else ""


@strawberry.type(name="User")
class UserType:
    """Public view of an account. The password hash is never exposed."""

    id: str
    username: str
    email: str
    display_name: str
    avatar: str
    description: str
    status: str
    role: UserRole
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, user: User) -> "UserType":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            display_name=user.display_name,
            avatar=user.avatar,
            description=user.description,
            status=user.status,
            role=UserRole(user.role),
            created_at=_iso(user.created_at),
            updated_at=_iso(user.updated_at),
        )


@strawberry.type(name="DirectMessage")
class DirectMessageType:
    id: int
    sender_id: str
    recipient_id: str
    content: str
    created_at: str

    @classmethod
    def from_model(cls, message: DirectMessage) -> "DirectMessageType":
        return cls(
            id=message.id,
            sender_id=message.sender_id,
            recipient_id=message.recipient_id,
            content=message.content,
            created_at=_iso(message.created_at),
        )


@strawberry.type
class QueryError:
    code: int
    message: str

    @classmethod
    def from_err(cls, err: Err) -> "QueryError":
        return cls(code=err.code, message=err.message)


# Envelopes: every field returns errors (on failure) or its payload (on success).


@strawberry.type
class UserResponse:
    errors: list[QueryError] | None = None
    user: UserType | None = None


@strawberry.type
class UsersResponse:
    errors: list[QueryError] | None = None
    users: list[UserType] | None = None


@strawberry.type
class DirectMessageResponse:
    errors: list[QueryError] | None = None
    message: DirectMessageType | None = None


@strawberry.type
class DirectMessagesResponse:
    errors: list[QueryError] | None = None
    messages: list[DirectMessageType] | None = None


def user_response(result: Result[User | None]) -> UserResponse:
    if isinstance(result, Ok):
        user = result.value
        return UserResponse(user=UserType.from_model(user) if user is not None else None)
    return UserResponse(errors=[QueryError.from_err(result)])


def users_response(result: Result[list[User]]) -> UsersResponse:
    if isinstance(result, Ok):
        return UsersResponse(users=[UserType.from_model(u) for u in result.value])
    return UsersResponse(errors=[QueryError.from_err(result)])


def message_response(result: Result[DirectMessage]) -> DirectMessageResponse:
    if isinstance(result, Ok):
        return DirectMessageResponse(message=DirectMessageType.from_model(result.value))
    return DirectMessageResponse(errors=[QueryError.from_err(result)])


def messages_response(result: Result[list[DirectMessage]]) -> DirectMessagesResponse:
    if isinstance(result, Ok):
        return DirectMessagesResponse(
            messages=[DirectMessageType.from_model(m) for m in result.value]
        )
    return DirectMessagesResponse(errors=[QueryError.from_err(result)])


# Inputs


@strawberry.input
class UsernamePasswordInput:
    username: str
    password: str


@strawberry.input
class UsernamePasswordEmailInput:
    username: str
    password: str
    email: str


@strawberry.input
class UpdateUserInput:
    display_name: str | None = None
    avatar: str | None = None
    description: str | None = None
    status: str | None = None


@strawberry.input
class BanUserInput:
    id: str
    reason: str = ""
    expires_at: datetime | None = None


@strawberry.input
class DirectMessageInput:
    recipient_id: str
    content: str
