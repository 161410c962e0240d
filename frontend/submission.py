"""
frontend/submission.py

Two-phase listing submission (project and property listing flows).

Sequence:
    Editing -> Validating -> UploadingAssets -> CreatingResource -> Succeeded

Failure exits: ValidationFailed, AssetUploadFailed (non-fatal, the flow
continues without images), ResourceCreationFailed. Every failure state can
go back to Editing with all field values intact.

Guarantees:
- Validation runs on every attempt and never touches the network
- No pending images: the uploader is never called
- Image upload failure degrades to "create without images"
- Collaborator exceptions never escape submit()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from backend.entitlements import can_create_project, limit_reached_message
from backend.models import Subscription
from domains.listing.models.listing_form import ListingForm, TOTAL_STEPS

# Import frontend modules (robust fallback for different run contexts)
try:
    from frontend.config import IS_DEV
    from frontend.observability import track_event
except ModuleNotFoundError:
    from config import IS_DEV
    from observability import track_event


DEFAULT_CREATE_ERROR = "Failed to create project listing"
DEFAULT_EXCEPTION_ERROR = "Failed to create project listing. Please try again."
DEFAULT_UPLOAD_ERROR = "Image upload failed or returned no URLs"
LIMIT_ERROR_KEY = "_limit"

OPTIMISTIC_SUCCESS_WARNING = (
    "Backend reported success but returned no data. The listing may still have been saved."
)


class SubmissionState(str, Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    UPLOADING_ASSETS = "uploading_assets"
    CREATING_RESOURCE = "creating_resource"
    SUCCEEDED = "succeeded"
    VALIDATION_FAILED = "validation_failed"
    ASSET_UPLOAD_FAILED = "asset_upload_failed"
    RESOURCE_CREATION_FAILED = "resource_creation_failed"


IN_FLIGHT_STATES = {
    SubmissionState.VALIDATING,
    SubmissionState.UPLOADING_ASSETS,
    SubmissionState.ASSET_UPLOAD_FAILED,
    SubmissionState.CREATING_RESOURCE,
}


class AssetUploader(Protocol):
    def upload(self, files: List[Any]) -> Dict[str, Any]:
        ...


class ResourceCreator(Protocol):
    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass
class SubmissionResult:
    state: SubmissionState
    data: Any = None
    errors: Dict[str, str] = field(default_factory=dict)
    message: str = ""
    warnings: List[str] = field(default_factory=list)
    asset_refs: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state == SubmissionState.SUCCEEDED


# ============================================================================
# Response interpretation
# ============================================================================

def _has_data(data: Any) -> bool:
    """Present and not an empty container/string."""
    if data is None:
        return False
    if isinstance(data, (dict, list, str)) and len(data) == 0:
        return False
    return True


def is_creation_success(response: Any) -> bool:
    """
    success == True, or the success key is missing and data came back.

    Tolerates backends that omit the flag on 201 responses.
    """
    if not isinstance(response, dict):
        return False
    if response.get("success") is True:
        return True
    return "success" not in response and _has_data(response.get("data"))


def extract_error_message(response: Any, default: str = DEFAULT_CREATE_ERROR) -> str:
    """
    First available message, in this order:
    message -> error (string) -> error.message -> default.
    """
    if not isinstance(response, dict):
        return default

    if response.get("message"):
        return str(response["message"])

    error = response.get("error")
    if isinstance(error, str) and error:
        return error
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])

    return default


# ============================================================================
# Submission
# ============================================================================

class ListingSubmission:
    """
    Drives one listing form through validation, image upload and creation.

    Not safe for concurrent submit() calls on the same instance; separate
    instances share nothing.

    Args:
        form: ListingForm being edited
        uploader: AssetUploader collaborator (batch image upload)
        creator: ResourceCreator collaborator (listing creation)
        subscription: Current subscription for the project-count gate
        project_count: Projects the account already has
        enforce_project_limit: False for flows that do not gate on the tier
        asset_field: Payload key the uploaded references are stored under
    """

    def __init__(
        self,
        form: ListingForm,
        uploader: AssetUploader,
        creator: ResourceCreator,
        subscription: Optional[Subscription] = None,
        project_count: int = 0,
        enforce_project_limit: bool = True,
        asset_field: str = "images",
    ):
        self.form = form
        self.uploader = uploader
        self.creator = creator
        self.subscription = subscription
        self.project_count = project_count
        self.enforce_project_limit = enforce_project_limit
        self.asset_field = asset_field

        self.step = 1
        self.state = SubmissionState.EDITING
        self.history: List[SubmissionState] = [SubmissionState.EDITING]
        self.errors: Dict[str, str] = {}
        self.events: List[Dict[str, Any]] = []
        self.last_result: Optional[SubmissionResult] = None

    # ---- state helpers -------------------------------------------------

    def _enter(self, state: SubmissionState) -> None:
        self.state = state
        self.history.append(state)
        if IS_DEV:
            print(f"[SUBMIT] -> {state.value} (step {self.step})")

    def _finish(self, result: SubmissionResult) -> SubmissionResult:
        self._enter(result.state)
        self.last_result = result
        return result

    # ---- editing -------------------------------------------------------

    def set_field(self, name: str, value: str) -> None:
        """Update a scalar form field and clear its error, if any."""
        setattr(self.form, name, value)
        self.errors.pop(name, None)

    def advance(self) -> bool:
        """
        Validate the current step only and move forward on success.

        Returns:
            True if the step advanced, False if validation failed
        """
        self._enter(SubmissionState.VALIDATING)
        errors = self.form.validate_step(self.step)
        if errors:
            self.errors = errors
            track_event(self.events, "step_validation_failed", {"step": self.step, "fields": sorted(errors)})
            self._enter(SubmissionState.VALIDATION_FAILED)
            return False

        self.errors = {}
        self.step = min(self.step + 1, TOTAL_STEPS)
        self._enter(SubmissionState.EDITING)
        return True

    def back(self) -> None:
        self.step = max(self.step - 1, 1)
        if self.state != SubmissionState.EDITING:
            self._enter(SubmissionState.EDITING)

    def edit(self) -> None:
        """Return to Editing after any outcome. Form values are kept as-is."""
        if self.state != SubmissionState.EDITING:
            self._enter(SubmissionState.EDITING)

    # ---- submission ----------------------------------------------------

    def submit(self) -> SubmissionResult:
        """
        Run the full submission: validate everything, gate, upload, create.

        Returns:
            SubmissionResult (never raises for collaborator failures)

        Raises:
            RuntimeError: if called while a submission is already in flight,
                or after success without an edit() in between
        """
        if self.state in IN_FLIGHT_STATES:
            raise RuntimeError(f"Submission already in progress ({self.state.value})")
        if self.state == SubmissionState.SUCCEEDED:
            raise RuntimeError("Listing already created; call edit() before submitting again")

        try:
            return self._run()
        except Exception as e:
            # Form/payload bugs propagate, but the instance must stay usable
            track_event(self.events, "submit_aborted", {"exception": type(e).__name__}, level="error")
            self._enter(SubmissionState.EDITING)
            raise

    def _run(self) -> SubmissionResult:
        self._enter(SubmissionState.VALIDATING)
        track_event(self.events, "submit_started", {"step": self.step, "images": len(self.form.images)})

        errors = self.form.validate_all()
        if not errors:
            errors = self.form.validate_financials()
        if errors:
            return self._validation_failed(errors)

        if self.enforce_project_limit and not can_create_project(self.subscription, self.project_count):
            message = limit_reached_message(self.subscription)
            return self._validation_failed({LIMIT_ERROR_KEY: message}, message=message)

        self.errors = {}
        payload = self.form.to_payload().to_wire()

        warnings: List[str] = []
        payload[self.asset_field] = self._upload_assets(warnings)

        return self._create(payload, warnings)

    def _validation_failed(self, errors: Dict[str, str], message: str = "") -> SubmissionResult:
        self.errors = errors
        track_event(self.events, "validation_failed", {"fields": sorted(errors)}, level="warning")
        return self._finish(SubmissionResult(
            state=SubmissionState.VALIDATION_FAILED,
            errors=dict(errors),
            message=message,
        ))

    def _upload_assets(self, warnings: List[str]) -> List[str]:
        files = list(self.form.images)
        if not files:
            track_event(self.events, "asset_upload_skipped")
            return []

        self._enter(SubmissionState.UPLOADING_ASSETS)
        try:
            response = self.uploader.upload(files)
        except Exception as e:
            return self._asset_upload_failed(str(e) or type(e).__name__, warnings)

        data = response.get("data") if isinstance(response, dict) else None
        if isinstance(response, dict) and response.get("success") is True and isinstance(data, list):
            refs = [str(ref) for ref in data]
            track_event(self.events, "asset_upload_succeeded", {"count": len(refs)})
            return refs

        return self._asset_upload_failed(extract_error_message(response, DEFAULT_UPLOAD_ERROR), warnings)

    def _asset_upload_failed(self, reason: str, warnings: List[str]) -> List[str]:
        self._enter(SubmissionState.ASSET_UPLOAD_FAILED)
        warnings.append(f"Images could not be uploaded ({reason}). The listing will be created without images.")
        track_event(
            self.events,
            "asset_upload_failed",
            {"reason": reason, "files": [f.name for f in self.form.images]},
            level="warning",
        )
        return []

    def _create(self, payload: Dict[str, Any], warnings: List[str]) -> SubmissionResult:
        self._enter(SubmissionState.CREATING_RESOURCE)
        asset_refs = list(payload.get(self.asset_field, []))

        try:
            response = self.creator.create(payload)
        except Exception as e:
            message = str(e) or DEFAULT_EXCEPTION_ERROR
            track_event(self.events, "creation_failed", {"reason": message, "exception": type(e).__name__}, level="error")
            return self._finish(SubmissionResult(
                state=SubmissionState.RESOURCE_CREATION_FAILED,
                message=message,
                warnings=warnings,
                asset_refs=asset_refs,
            ))

        if is_creation_success(response):
            data = response.get("data")
            if not _has_data(data):
                warnings.append(OPTIMISTIC_SUCCESS_WARNING)
                track_event(self.events, "creation_succeeded_without_data", level="warning")
            else:
                track_event(self.events, "creation_succeeded")
            return self._finish(SubmissionResult(
                state=SubmissionState.SUCCEEDED,
                data=data,
                warnings=warnings,
                asset_refs=asset_refs,
            ))

        message = extract_error_message(response)
        track_event(
            self.events,
            "creation_failed",
            {"reason": message, "success": response.get("success") if isinstance(response, dict) else None},
            level="error",
        )
        return self._finish(SubmissionResult(
            state=SubmissionState.RESOURCE_CREATION_FAILED,
            message=message,
            warnings=warnings,
            asset_refs=asset_refs,
        ))
