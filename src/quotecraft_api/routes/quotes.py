"""Quote endpoints."""

from fastapi import APIRouter, Depends, Query

from quotecraft_api.auth.dependencies import get_current_user
from quotecraft_api.dependencies import get_quote_service
from quotecraft_api.models.quote import Quote, QuoteCreate, QuoteUpdate
from quotecraft_api.models.responses import QuoteTextRequest, QuoteTextResponse
from quotecraft_api.models.user import User
from quotecraft_api.services.quote_service import QuoteService
from quotecraft_api.services.text_generation import generate_quote_text

router = APIRouter(prefix="/quotes", tags=["Quotes"])


@router.post(
    "",
    response_model=Quote,
    status_code=201,
    summary="Create Quote",
    description="Create a new quote. Limited to a monthly quota per user.",
)
async def create_quote(
    request: QuoteCreate,
    user: User = Depends(get_current_user),
    quote_service: QuoteService = Depends(get_quote_service),
) -> Quote:
    """
    Create a quote.

    The quote starts as a draft unless another status is given. Returns
    429 with code `QUOTA_EXCEEDED` once the monthly quota is used up, so
    the client can offer an upgrade instead of showing a form error.
    """
    return await quote_service.create_quote(request, user)


@router.get(
    "",
    response_model=list[Quote],
    summary="List Quotes",
    description="List the authenticated user's quotes, most recently updated first.",
)
async def list_quotes(
    limit: int | None = Query(default=None, ge=1, le=1000, description="Maximum results"),
    user: User = Depends(get_current_user),
    quote_service: QuoteService = Depends(get_quote_service),
) -> list[Quote]:
    return await quote_service.list_quotes(user, limit)


@router.get(
    "/recent",
    response_model=list[Quote],
    summary="Recent Quotes",
    description="The user's most recently updated quotes, for the dashboard.",
)
async def recent_quotes(
    limit: int = Query(default=5, ge=1, le=100, description="Maximum results"),
    user: User = Depends(get_current_user),
    quote_service: QuoteService = Depends(get_quote_service),
) -> list[Quote]:
    return await quote_service.list_quotes(user, limit)


@router.post(
    "/generate-text",
    response_model=QuoteTextResponse,
    summary="Generate Quote Text",
    description="Preview the body text for a quote without saving anything.",
)
async def preview_quote_text(
    request: QuoteTextRequest,
    user: User = Depends(get_current_user),
) -> QuoteTextResponse:
    text = generate_quote_text(
        request.client_name,
        request.hours,
        request.price,
        request.description,
        request.template_style,
    )
    return QuoteTextResponse(text=text)


@router.get(
    "/{quote_id}",
    response_model=Quote,
    summary="Get Quote",
    description="Get details of a specific quote.",
)
async def get_quote(
    quote_id: str,
    user: User = Depends(get_current_user),
    quote_service: QuoteService = Depends(get_quote_service),
) -> Quote:
    """
    Get quote details by ID.

    Returns 404 if the quote doesn't exist and 403 if it belongs to
    another user.
    """
    return await quote_service.get_quote(quote_id, user)


@router.patch(
    "/{quote_id}",
    response_model=Quote,
    summary="Update Quote",
    description="Partially update a quote, including its status.",
)
async def update_quote(
    quote_id: str,
    request: QuoteUpdate,
    user: User = Depends(get_current_user),
    quote_service: QuoteService = Depends(get_quote_service),
) -> Quote:
    """
    Update a quote.

    - Only fields present in the body are changed
    - Setting status to `pending` records when the quote was sent
    - Status changes outside the allowed transitions return 400
    """
    return await quote_service.update_quote(quote_id, request, user)


@router.post(
    "/{quote_id}/send",
    response_model=Quote,
    summary="Send Quote",
    description="Mark a quote as sent to the client.",
)
async def send_quote(
    quote_id: str,
    user: User = Depends(get_current_user),
    quote_service: QuoteService = Depends(get_quote_service),
) -> Quote:
    return await quote_service.send_quote(quote_id, user)


@router.post(
    "/{quote_id}/generate-text",
    response_model=Quote,
    summary="Generate Quote Body",
    description="Generate and store the quote's body text from its fields.",
)
async def generate_text(
    quote_id: str,
    user: User = Depends(get_current_user),
    quote_service: QuoteService = Depends(get_quote_service),
) -> Quote:
    return await quote_service.generate_text(quote_id, user)


@router.delete(
    "/{quote_id}",
    status_code=204,
    summary="Delete Quote",
    description="Delete a quote.",
)
async def delete_quote(
    quote_id: str,
    user: User = Depends(get_current_user),
    quote_service: QuoteService = Depends(get_quote_service),
) -> None:
    """
    Delete a quote.

    Only the quote owner can delete it. The user's lifetime quote counter
    is not decremented.
    """
    await quote_service.delete_quote(quote_id, user)
