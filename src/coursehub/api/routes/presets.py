"""Schedule preset endpoints."""

from fastapi import APIRouter, status

from coursehub.api.dependencies import OptionalUserIdDep, PresetsDep, UserIdDep
from coursehub.api.models import (
    APIResponse,
    CreatePresetRequest,
    PresetResponse,
    UpdatePresetRequest,
    preset_to_response,
)

router = APIRouter(prefix="/presets", tags=["presets"])


@router.get("", response_model=APIResponse[list[PresetResponse]])
def list_presets(
    presets: PresetsDep, user_id: OptionalUserIdDep
) -> APIResponse[list[PresetResponse]]:
    """List the built-in presets and, for a known caller, their custom presets."""
    return APIResponse(data=[preset_to_response(p) for p in presets.all(user_id)])


@router.post(
    "",
    response_model=APIResponse[PresetResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_preset(
    body: CreatePresetRequest,
    presets: PresetsDep,
    user_id: UserIdDep,
) -> APIResponse[PresetResponse]:
    """Save a custom preset for the caller."""
    preset = presets.create(user_id, body.name, body.parameters.to_parameters())
    return APIResponse(data=preset_to_response(preset))


@router.put("/{preset_id}", response_model=APIResponse[PresetResponse])
def update_preset(
    preset_id: str,
    body: UpdatePresetRequest,
    presets: PresetsDep,
    user_id: UserIdDep,
) -> APIResponse[PresetResponse]:
    """Rename or re-weight one of the caller's custom presets."""
    preset = presets.update(
        preset_id,
        user_id,
        name=body.name,
        parameters=body.parameters.to_parameters() if body.parameters else None,
    )
    return APIResponse(data=preset_to_response(preset))


@router.delete("/{preset_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_preset(preset_id: str, presets: PresetsDep, user_id: UserIdDep) -> None:
    """Delete one of the caller's custom presets."""
    presets.delete(preset_id, user_id)
