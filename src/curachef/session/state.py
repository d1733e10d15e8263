"""
CuraChef - Session State Machine.

The session is an immutable, serializable SessionState. It changes only
through `reduce(state, action)` over the closed set of actions below.

States:
- idle: nothing in flight for the active feature
- generating: feature is in `state.generating` (one busy flag per feature)
- error: `state.error` is set, overlaid on either of the above
- image processing: independent sub-state while identifying ingredients
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from curachef.core.features import GENERATION_FEATURES, Feature, MedicalCondition
from curachef.session.reconciler import EMPTY_RESULT, FeatureResult, reconcile


def _initial_results() -> dict[Feature, FeatureResult]:
    return {feature: EMPTY_RESULT for feature in GENERATION_FEATURES}


class SessionState(BaseModel):
    """Complete session state. Never mutated in place."""

    model_config = ConfigDict(frozen=True)

    active_feature: Feature = Feature.RECIPE_GENERATOR
    text_input: str = ""
    selected_condition: MedicalCondition = MedicalCondition.NONE
    image_base64: str | None = None
    image_mime_type: str = "image/jpeg"
    generating: frozenset[Feature] = frozenset()
    is_processing_image: bool = False
    error: str | None = None
    results: dict[Feature, FeatureResult] = Field(default_factory=_initial_results)
    show_identified_message: bool = False
    is_mobile_menu_open: bool = False

    @property
    def is_loading(self) -> bool:
        """Whether the active feature's view should show a spinner."""
        return self.active_feature in self.generating or self.is_processing_image

    def is_generating(self, feature: Feature) -> bool:
        return feature in self.generating

    def result_for(self, feature: Feature) -> FeatureResult:
        return self.results.get(feature, EMPTY_RESULT)

    @property
    def active_result(self) -> FeatureResult:
        return self.result_for(self.active_feature)


INITIAL_STATE = SessionState()


# =============================================================================
# Actions
# =============================================================================


class SelectFeature(BaseModel):
    """Switch feature; clears text, image and condition."""

    type: Literal["select_feature"] = "select_feature"
    feature: Feature


class SetTextInput(BaseModel):
    type: Literal["set_text_input"] = "set_text_input"
    text: str


class SetImage(BaseModel):
    type: Literal["set_image"] = "set_image"
    image_base64: str | None
    mime_type: str = "image/jpeg"


class SetCondition(BaseModel):
    type: Literal["set_condition"] = "set_condition"
    condition: MedicalCondition


class GenerationStart(BaseModel):
    """Mark the feature busy and reset its slot."""

    type: Literal["generation_start"] = "generation_start"
    feature: Feature


class GenerationProgress(BaseModel):
    """Merge an intermediate outcome; the feature stays busy."""

    type: Literal["generation_progress"] = "generation_progress"
    feature: Feature
    outcome: SerializeAsAny[BaseModel] | None = None


class GenerationComplete(BaseModel):
    """Merge the final outcome and clear the busy flag."""

    type: Literal["generation_complete"] = "generation_complete"
    feature: Feature
    outcome: SerializeAsAny[BaseModel] | None = None


class GenerationError(BaseModel):
    """Generation failed: slot back to empty, error shown."""

    type: Literal["generation_error"] = "generation_error"
    feature: Feature
    message: str


class ReportError(BaseModel):
    """Show an error without touching any slot (validation failures)."""

    type: Literal["report_error"] = "report_error"
    message: str


class ClearError(BaseModel):
    type: Literal["clear_error"] = "clear_error"


class ImageProcessingStart(BaseModel):
    type: Literal["image_processing_start"] = "image_processing_start"


class IngredientsIdentified(BaseModel):
    """Identified ingredients overwrite the text input."""

    type: Literal["ingredients_identified"] = "ingredients_identified"
    ingredients: str


class ImageProcessingComplete(BaseModel):
    type: Literal["image_processing_complete"] = "image_processing_complete"


class ToggleMobileMenu(BaseModel):
    type: Literal["toggle_mobile_menu"] = "toggle_mobile_menu"
    open: bool


class SignOutReset(BaseModel):
    type: Literal["sign_out_reset"] = "sign_out_reset"


# Union type for all actions
SessionAction = (
    SelectFeature
    | SetTextInput
    | SetImage
    | SetCondition
    | GenerationStart
    | GenerationProgress
    | GenerationComplete
    | GenerationError
    | ReportError
    | ClearError
    | ImageProcessingStart
    | IngredientsIdentified
    | ImageProcessingComplete
    | ToggleMobileMenu
    | SignOutReset
)


# =============================================================================
# Reducer
# =============================================================================


def _with_slot(state: SessionState, feature: Feature, slot: FeatureResult) -> dict[Feature, FeatureResult]:
    results = dict(state.results)
    results[feature] = slot
    return results


def reduce(state: SessionState, action: SessionAction) -> SessionState:
    """
    Apply one action and return the next state.

    Only the slot of the feature named by the action is ever touched.
    """
    if isinstance(action, SelectFeature):
        return state.model_copy(update={
            "active_feature": action.feature,
            "text_input": "",
            "image_base64": None,
            "selected_condition": MedicalCondition.NONE,
            "is_mobile_menu_open": False,
            "show_identified_message": False,
        })

    if isinstance(action, SetTextInput):
        # Editing the identified list dismisses the notice
        return state.model_copy(update={"text_input": action.text, "show_identified_message": False})

    if isinstance(action, SetImage):
        return state.model_copy(update={
            "image_base64": action.image_base64,
            "image_mime_type": action.mime_type,
            "show_identified_message": False,
        })

    if isinstance(action, SetCondition):
        return state.model_copy(update={"selected_condition": action.condition})

    if isinstance(action, GenerationStart):
        return state.model_copy(update={
            "generating": state.generating | {action.feature},
            "error": None,
            "results": _with_slot(state, action.feature, EMPTY_RESULT),
        })

    if isinstance(action, GenerationProgress):
        slot = reconcile(state.result_for(action.feature), action.feature, action.outcome)
        return state.model_copy(update={"results": _with_slot(state, action.feature, slot)})

    if isinstance(action, GenerationComplete):
        slot = reconcile(state.result_for(action.feature), action.feature, action.outcome)
        return state.model_copy(update={
            "generating": state.generating - {action.feature},
            "results": _with_slot(state, action.feature, slot),
        })

    if isinstance(action, GenerationError):
        return state.model_copy(update={
            "generating": state.generating - {action.feature},
            "error": action.message,
            "results": _with_slot(state, action.feature, EMPTY_RESULT),
        })

    if isinstance(action, ReportError):
        return state.model_copy(update={"error": action.message})

    if isinstance(action, ClearError):
        return state.model_copy(update={"error": None})

    if isinstance(action, ImageProcessingStart):
        return state.model_copy(update={"is_processing_image": True, "error": None})

    if isinstance(action, IngredientsIdentified):
        return state.model_copy(update={
            "text_input": action.ingredients,
            "show_identified_message": True,
        })

    if isinstance(action, ImageProcessingComplete):
        return state.model_copy(update={"is_processing_image": False})

    if isinstance(action, ToggleMobileMenu):
        return state.model_copy(update={"is_mobile_menu_open": action.open})

    if isinstance(action, SignOutReset):
        return INITIAL_STATE

    raise TypeError(f"Unknown session action: {type(action).__name__}")
