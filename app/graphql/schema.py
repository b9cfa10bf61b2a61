"""GraphQL schema: Query and Mutation resolvers wired to the service layer.

Resolvers stay thin. Each one pulls the DB session and the explicit session
state from the context, calls one service handler and maps its Result onto
an envelope. Guards are attached as field extensions.
"""

import strawberry
from graphql import GraphQLError
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from app.core.config import settings
from app.graphql.context import Context, get_context
from app.graphql.guards import CheckBans, CheckBansIfAuthed
from app.graphql.types import (
    BanUserInput,
    DirectMessageInput,
    DirectMessageResponse,
    DirectMessagesResponse,
    UpdateUserInput,
    UserResponse,
    UsernamePasswordEmailInput,
    UsernamePasswordInput,
    UsersResponse,
    message_response,
    messages_response,
    user_response,
    users_response,
)
from app.services import messages, moderation, social, users
from app.services.result import Ok

ContextInfo = Info[Context, None]


@strawberry.type
class Query:
    @strawberry.field(extensions=[CheckBansIfAuthed(UserResponse)])
    def me(self, info: ContextInfo) -> UserResponse:
        ctx = info.context
        return user_response(users.me(ctx.db, ctx.session))

    @strawberry.field
    def user(self, info: ContextInfo, id: str) -> UserResponse:
        return user_response(users.get_user(info.context.db, id))

    @strawberry.field
    def followers(self, info: ContextInfo, id: str) -> UsersResponse:
        return users_response(social.list_followers(info.context.db, id))

    @strawberry.field
    def following(self, info: ContextInfo, id: str) -> UsersResponse:
        return users_response(social.list_following(info.context.db, id))

    @strawberry.field(extensions=[CheckBans(UsersResponse)])
    def friends(self, info: ContextInfo) -> UsersResponse:
        ctx = info.context
        return users_response(social.list_friends(ctx.db, ctx.session))

    @strawberry.field(
        extensions=[CheckBans(DirectMessagesResponse, target=lambda args: args["user_id"])]
    )
    def direct_messages(self, info: ContextInfo, user_id: str) -> DirectMessagesResponse:
        ctx = info.context
        return messages_response(messages.list_conversation(ctx.db, ctx.session, user_id))


@strawberry.type
class Mutation:
    @strawberry.mutation
    def register(self, info: ContextInfo, input: UsernamePasswordEmailInput) -> UserResponse:
        ctx = info.context
        result = users.register(ctx.db, ctx.session, input.username, input.password, input.email)
        if isinstance(result, Ok):
            ctx.set_session_cookie()
        return user_response(result)

    @strawberry.mutation(extensions=[CheckBansIfAuthed(UserResponse)])
    def login(self, info: ContextInfo, input: UsernamePasswordInput) -> UserResponse:
        ctx = info.context
        result = users.login(ctx.db, ctx.session, input.username, input.password)
        if isinstance(result, Ok):
            ctx.set_session_cookie()
        return user_response(result)

    @strawberry.mutation(extensions=[CheckBans(UserResponse)])
    def update_user(self, info: ContextInfo, data: UpdateUserInput) -> UserResponse:
        ctx = info.context
        changes = {
            "display_name": data.display_name,
            "avatar": data.avatar,
            "description": data.description,
            "status": data.status,
        }
        return user_response(users.update_user(ctx.db, ctx.session, changes))

    @strawberry.mutation(extensions=[CheckBans(UserResponse)])
    def delete_user(self, info: ContextInfo, id: str) -> UserResponse:
        ctx = info.context
        deleting_self = id == ctx.session.user_id
        result = users.delete_user(ctx.db, ctx.session, id)
        if isinstance(result, Ok) and deleting_self:
            ctx.clear_session_cookie()
        return user_response(result)

    @strawberry.mutation
    def logout(self, info: ContextInfo) -> bool:
        ctx = info.context
        if ctx.session_failed:
            return False
        return users.logout(ctx.db, ctx.session, ctx.clear_session_cookie)

    @strawberry.mutation(extensions=[CheckBans(UserResponse)])
    def ban_user(self, info: ContextInfo, input: BanUserInput) -> UserResponse:
        ctx = info.context
        return user_response(
            moderation.ban_user(ctx.db, ctx.session, input.id, input.reason, input.expires_at)
        )

    @strawberry.mutation(extensions=[CheckBans(UserResponse)])
    def unban_user(self, info: ContextInfo, id: str) -> UserResponse:
        ctx = info.context
        return user_response(moderation.unban_user(ctx.db, ctx.session, id))

    @strawberry.mutation(extensions=[CheckBans(UserResponse)])
    def block_user(self, info: ContextInfo, id: str) -> UserResponse:
        ctx = info.context
        return user_response(social.block_user(ctx.db, ctx.session, id))

    @strawberry.mutation(extensions=[CheckBans(UserResponse)])
    def unblock_user(self, info: ContextInfo, id: str) -> UserResponse:
        ctx = info.context
        return user_response(social.unblock_user(ctx.db, ctx.session, id))

    @strawberry.mutation(extensions=[CheckBans(UserResponse, target=lambda args: args["id"])])
    def follow_user(self, info: ContextInfo, id: str) -> UserResponse:
        ctx = info.context
        return user_response(social.follow_user(ctx.db, ctx.session, id))

    @strawberry.mutation(extensions=[CheckBans(UserResponse)])
    def unfollow_user(self, info: ContextInfo, id: str) -> UserResponse:
        ctx = info.context
        return user_response(social.unfollow_user(ctx.db, ctx.session, id))

    @strawberry.mutation(
        extensions=[
            CheckBans(DirectMessageResponse, target=lambda args: args["input"].recipient_id)
        ]
    )
    def send_direct_message(
        self, info: ContextInfo, input: DirectMessageInput
    ) -> DirectMessageResponse:
        ctx = info.context
        return message_response(
            messages.send_message(ctx.db, ctx.session, input.recipient_id, input.content)
        )


def _raised_by_resolver(error: GraphQLError) -> bool:
    """Mask exceptions escaping resolvers; query validation errors stay readable."""
    return error.original_error is not None


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[MaskErrors(should_mask_error=_raised_by_resolver)],
)

graphql_router = GraphQLRouter(
    schema,
    context_getter=get_context,
    graphql_ide="graphiql" if settings.APP_ENV == "dev" else None,
)
