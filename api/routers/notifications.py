from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from api.dependencies import get_notification_pipeline
from api.schemas.responses import MessageResponse
from core.notifications.pipeline import NotificationPipeline
from core.notifications.results import OutcomeKind

router = APIRouter(tags=["Notifications"])

# Not-found stays a 500 for compatibility with existing callers, even though
# it is really a client input error.
STATUS_BY_OUTCOME = {
    OutcomeKind.SENT: status.HTTP_200_OK,
    OutcomeKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    OutcomeKind.NOT_FOUND: status.HTTP_500_INTERNAL_SERVER_ERROR,
    OutcomeKind.ENCODING_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    OutcomeKind.PUBLISH_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@router.post(
    "/send",
    response_model=MessageResponse,
    responses={
        400: {"model": MessageResponse, "description": "fromID or toID is not an integer"},
        500: {"model": MessageResponse, "description": "Unknown party, or the notification could not be encoded"},
        503: {"model": MessageResponse, "description": "The broker did not acknowledge the notification"},
    },
)
async def send_notification(
    request: Request,
    pipeline: NotificationPipeline = Depends(get_notification_pipeline),
):
    """Publish a notification from one party to another.

    Form fields: ``fromID`` and ``toID`` (decimal integers) and ``message``.
    Responds only after the broker has acknowledged the record.
    """
    form = await request.form()
    outcome = await pipeline.submit(form)

    return JSONResponse(
        status_code=STATUS_BY_OUTCOME[outcome.kind],
        content=MessageResponse(message=outcome.message).model_dump(),
    )
