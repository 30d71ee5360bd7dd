"""Registration queue endpoints."""

from fastapi import APIRouter, status

from coursehub.api.dependencies import CatalogDep, QueueDep, UserIdDep
from coursehub.api.models import (
    APIResponse,
    EnqueueRequest,
    IntentResponse,
    TickResponse,
    intent_to_response,
    tick_to_response,
)
from coursehub.planner import SelectedSection
from coursehub.registration import IntentNotFoundError, InvalidIntentError

router = APIRouter(prefix="/registration", tags=["registration"])


@router.post(
    "/queue",
    response_model=APIResponse[IntentResponse],
    status_code=status.HTTP_201_CREATED,
)
def enqueue(
    body: EnqueueRequest,
    queue: QueueDep,
    catalog: CatalogDep,
    user_id: UserIdDep,
) -> APIResponse[IntentResponse]:
    """Queue a schedule's sections for registration at a future time."""
    sections = []
    for ref in body.sections:
        course = catalog.require(ref.course_code)
        section = course.get_section(ref.section_id)
        if section is None:
            raise InvalidIntentError(f"Unknown section {ref.section_id} of {ref.course_code}")
        sections.append(SelectedSection.from_section(course, section))

    intent = queue.enqueue(
        user_id=user_id,
        schedule_id=body.schedule_id,
        sections=sections,
        target_instant=body.registration_date,
    )
    return APIResponse(data=intent_to_response(intent))


@router.get("/queue", response_model=APIResponse[list[IntentResponse]])
def list_queue(queue: QueueDep, user_id: UserIdDep) -> APIResponse[list[IntentResponse]]:
    """List the caller's registration intents."""
    return APIResponse(data=[intent_to_response(i) for i in queue.list_for_user(user_id)])


@router.post("/queue/tick", response_model=APIResponse[TickResponse])
def run_tick(queue: QueueDep, _user_id: UserIdDep) -> APIResponse[TickResponse]:
    """Run one queue sweep now."""
    return APIResponse(data=tick_to_response(queue.tick()))


@router.get("/queue/{intent_id}", response_model=APIResponse[IntentResponse])
def get_intent(intent_id: str, queue: QueueDep, user_id: UserIdDep) -> APIResponse[IntentResponse]:
    """Get one of the caller's registration intents."""
    intent = queue.get(intent_id)
    if intent.user_id != user_id:
        raise IntentNotFoundError(f"Registration intent '{intent_id}' not found")
    return APIResponse(data=intent_to_response(intent))


@router.delete("/queue/{intent_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_intent(intent_id: str, queue: QueueDep, user_id: UserIdDep) -> None:
    """Remove one of the caller's registration intents."""
    intent = queue.get(intent_id)
    if intent.user_id != user_id:
        raise IntentNotFoundError(f"Registration intent '{intent_id}' not found")
    queue.remove(intent_id)
