"""Schedule generation endpoint."""

from fastapi import APIRouter

from coursehub.api.dependencies import AssemblerDep, UserIdDep
from coursehub.api.models import (
    APIResponse,
    GenerateScheduleRequest,
    ScheduleResponse,
    schedule_to_response,
)
from coursehub.planner import ScheduleRequest

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.post("/generate", response_model=APIResponse[ScheduleResponse])
def generate_schedule(
    body: GenerateScheduleRequest,
    assembler: AssemblerDep,
    user_id: UserIdDep,
) -> APIResponse[ScheduleResponse]:
    """Generate a schedule from required courses and preferences or a preset."""
    request = ScheduleRequest(
        courses=tuple(body.courses),
        preferences=body.preferences.to_parameters() if body.preferences else None,
        preset_id=body.preset_id,
        user_id=user_id,
        semester=body.semester,
    )
    return APIResponse(data=schedule_to_response(assembler.generate(request)))
