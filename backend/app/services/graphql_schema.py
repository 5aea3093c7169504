"""GraphQL Schema: SDL and root resolvers served by the /graphql route.

Invariants:
    - Resolvers raise AppError subclasses; graphql-core copies their extensions
      onto the GraphQLError so the formatter sees the canonical code
    - sendEmail returns a payload (success=False) for rejected or failed sends;
      it only raises when the service is missing or the input is malformed

Design Decisions:
    - SDL + mapping root_value: graphql-core's default resolver calls
      callables found on the root mapping
"""

from typing import Any

from graphql import GraphQLResolveInfo, build_schema
from pydantic import ValidationError

from app.core.errors import ErrorContext, InvalidArgumentsError, ServiceUnavailableError
from app.schemas.email import EmailJob

SCHEMA_SDL = """
type Query {
  health: String!
}

input SendEmailInput {
  id: ID!
  email: String!
  subject: String!
  htmlBody: String!
  textBody: String
  userId: ID
}

type SendEmailPayload {
  id: ID!
  success: Boolean!
  messageId: String
  error: String
}

type Mutation {
  sendEmail(input: SendEmailInput!): SendEmailPayload!
}
"""

schema = build_schema(SCHEMA_SDL)


def _error_context(info: GraphQLResolveInfo) -> ErrorContext:
    return ErrorContext(correlation_id=info.context.get("correlation_id"))


def resolve_health(info: GraphQLResolveInfo) -> str:
    return "ok"


async def resolve_send_email(info: GraphQLResolveInfo, **args: Any) -> dict[str, Any]:
    service = info.context.get("email_service")
    if service is None:
        raise ServiceUnavailableError("Email service", _error_context(info))

    data = args["input"]
    try:
        job = EmailJob(
            id=data["id"],
            email=data["email"],
            subject=data["subject"],
            html_body=data["htmlBody"],
            text_body=data.get("textBody"),
            user_id=data.get("userId"),
        )
    except ValidationError as e:
        field = ".".join(str(loc) for loc in e.errors()[0]["loc"])
        raise InvalidArgumentsError(
            f"Invalid sendEmail input: {field}", field, _error_context(info),
        )

    result = await service.send_email(job)
    return {
        "id": result.id,
        "success": result.success,
        "messageId": result.message_id,
        "error": result.error,
    }


ROOT_VALUE = {
    "health": resolve_health,
    "sendEmail": resolve_send_email,
}
