"""HTTP route definitions for the user profile endpoints."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictBool, ValidationError, field_validator

from ..config import get_settings
from ..domain.contracts import UpdateAccountStatusInput, UpdateProfileInput
from ..domain.results import Failure, Result
from ..domain.service import UsersService
from ..domain.user import UserProfile
from ..security.guards import UserPerms, require_permissions
from ..security.identifiers import valid_path_id, validate_identifier
from .controller import ProfileController


settings = get_settings()

router = APIRouter(prefix=settings.route_prefix, tags=["user"])


class UserSettingsPayload(BaseModel):
    """Account display preferences as exchanged over HTTP."""

    model_config = ConfigDict(populate_by_name=True)

    language: str | None = None
    theme: str | None = None
    currency: str | None = None
    is_english_time_format: bool | None = Field(default=None, alias="isEnglishTimeFormat")


class UserProfileResponse(BaseModel):
    """Serialised representation of a `UserProfile` aggregate."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="_id")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str
    email_confirmed: bool = Field(default=False, alias="emailConfirmed")
    profile_picture: str | None = Field(default=None, alias="profilPicture")
    country: str | None = None
    location: str | None = None
    permissions: list[str] = Field(default_factory=list)
    created_at: str = Field(..., alias="createdAt")
    is_disabled: bool = Field(default=False, alias="isDisabled")
    is_deleted: bool = Field(default=False, alias="isDeleted")
    user_setting: UserSettingsPayload = Field(default_factory=UserSettingsPayload, alias="userSetting")

    @classmethod
    def from_domain(cls, user: UserProfile) -> "UserProfileResponse":
        """Build a response model from the domain aggregate."""
        return cls(
            user_id=user.user_id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            email_confirmed=user.email_confirmed,
            profile_picture=user.profile_picture,
            country=user.country,
            location=user.location,
            permissions=list(user.permissions),
            created_at=user.created_at.isoformat(),
            is_disabled=user.is_disabled,
            is_deleted=user.is_deleted,
            user_setting=UserSettingsPayload(
                language=user.settings.language,
                theme=user.settings.theme,
                currency=user.settings.currency,
                is_english_time_format=user.settings.is_english_time_format,
            ),
        )


class UpdateAccountStatusRequest(BaseModel):
    """Payload accepted when enabling or disabling an account."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    status: StrictBool

    @field_validator("user_id")
    @classmethod
    def _check_user_id(cls, value: str) -> str:
        return validate_identifier(value)


class UpdateUserRequest(BaseModel):
    """Partial profile update; omitted fields are left untouched."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: EmailStr | None = None
    profile_picture: str | None = Field(default=None, alias="profilPicture")
    country: str | None = None
    location: str | None = None
    user_setting: UserSettingsPayload | None = Field(default=None, alias="userSetting")

    @field_validator("email", mode="before")
    @classmethod
    def _reject_null_email(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("email must not be null")
        return value

    def to_input(self) -> UpdateProfileInput:
        changes = self.model_dump(exclude_unset=True, exclude={"user_setting"})
        settings_patch = None
        if self.user_setting is not None:
            settings_patch = self.user_setting.model_dump(exclude_unset=True)
        return UpdateProfileInput(changes=changes, settings=settings_patch)


def get_controller(request: Request) -> ProfileController:
    """Build a `ProfileController` around the `UsersService` on the application state."""
    service: UsersService = request.app.state.users_service
    return ProfileController(service)


ModelT = TypeVar("ModelT", bound=BaseModel)


def json_body(model: type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """Build a dependency that parses and validates the JSON body as ``model``.

    Declared after the permission dependency so the guards reject a caller
    before the body is read.
    """

    async def dependency(request: Request) -> ModelT:
        try:
            raw = await request.json()
        except ValueError as exc:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
            ) from exc
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            raise RequestValidationError(
                [{**error, "loc": ("body", *error["loc"])} for error in exc.errors(include_url=False)]
            ) from exc

    return dependency


def to_response(result: Result) -> JSONResponse:
    """Map a handler result onto the JSON envelope and its HTTP status code."""
    if isinstance(result, Failure):
        return JSONResponse(status_code=result.status_code, content=result.to_body())
    body: dict[str, Any] = {"statusCode": result.status_code, "message": result.message}
    if result.include_data:
        body["data"] = (
            UserProfileResponse.from_domain(result.data).model_dump(by_alias=True, mode="json")
            if result.data is not None
            else None
        )
    return JSONResponse(status_code=result.status_code, content=body)


@router.get("/{id}", dependencies=[Depends(require_permissions(UserPerms.READ))])
def get_user_profile_by_id(
    user_id: str = Depends(valid_path_id),
    controller: ProfileController = Depends(get_controller),
) -> JSONResponse:
    """Return a user's profile, soft-deleted records included."""
    return to_response(controller.get_profile(user_id))


@router.delete("/{id}", dependencies=[Depends(require_permissions(UserPerms.DELETE))])
def delete_user_by_id(
    user_id: str = Depends(valid_path_id),
    controller: ProfileController = Depends(get_controller),
) -> JSONResponse:
    """Soft-delete a user; already deleted users are reported as not found."""
    return to_response(controller.delete_profile(user_id))


@router.put("/status", dependencies=[Depends(require_permissions(UserPerms.UPDATE_STATUS))])
def update_user_status(
    payload: UpdateAccountStatusRequest = Depends(json_body(UpdateAccountStatusRequest)),
    controller: ProfileController = Depends(get_controller),
) -> JSONResponse:
    """Enable or disable a user account."""
    return to_response(
        controller.update_status(UpdateAccountStatusInput(user_id=payload.user_id, status=payload.status))
    )


@router.put("/{id}", dependencies=[Depends(require_permissions(UserPerms.UPDATE))])
def update_user_by_id(
    user_id: str = Depends(valid_path_id),
    payload: UpdateUserRequest = Depends(json_body(UpdateUserRequest)),
    controller: ProfileController = Depends(get_controller),
) -> JSONResponse:
    """Apply a partial profile update and return the stored profile."""
    return to_response(controller.update_profile(user_id, payload.to_input()))
