"""GraphQL Endpoint: executes operations and shapes errors through the formatter.

Invariants:
    - Every response carries X-Correlation-ID (request header reused, else UUID4)
    - No errors -> 200; with errors -> status derived by GraphQLErrorFormatter
    - Error payloads only ever contain formatter output (no stacks, no internals)
    - Exactly one "GraphQL error" log record per failed request
"""

import logging
from uuid import uuid4

from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import JSONResponse
from graphql import graphql
from pydantic import BaseModel, ConfigDict, Field

from app.api.dependencies import get_email_service, get_error_formatter
from app.core.format_graphql_errors import GraphQLErrorFormatter
from app.services.email_service import EmailService
from app.services.graphql_schema import ROOT_VALUE, schema

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["graphql"])

CORRELATION_HEADER = "X-Correlation-ID"


class GraphQLRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(min_length=1)
    variables: dict | None = None
    operation_name: str | None = Field(None, alias="operationName")


@router.post("/graphql")
async def graphql_endpoint(
    payload: GraphQLRequest,
    x_correlation_id: str | None = Header(None),
    formatter: GraphQLErrorFormatter = Depends(get_error_formatter),
    email_service: EmailService | None = Depends(get_email_service),
):
    correlation_id = x_correlation_id or str(uuid4())
    result = await graphql(
        schema,
        payload.query,
        root_value=ROOT_VALUE,
        context_value={
            "correlation_id": correlation_id,
            "email_service": email_service,
        },
        variable_values=payload.variables,
        operation_name=payload.operation_name,
    )

    body: dict = {}
    status_code = status.HTTP_200_OK
    if result.data is not None:
        body["data"] = result.data
    if result.errors:
        formatted = formatter.format(result.errors, correlation_id, sink=logger)
        body["errors"] = formatted.formatted
        status_code = formatted.status_code

    return JSONResponse(
        status_code=status_code,
        content=body,
        headers={CORRELATION_HEADER: correlation_id},
    )
