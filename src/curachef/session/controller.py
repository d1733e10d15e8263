"""
CuraChef - Session Controller.

Drives the state machine: validates user actions, calls the generation
invoker and dispatches the outcomes. The reducer stays pure; all awaiting
happens here.

Only CurachefError subclasses are caught. The invoker has already turned
transport failures into GenerationFailed by the time they arrive.
"""

import base64
import logging

from curachef.auth import AuthService
from curachef.core.features import Feature, MedicalCondition, PlanDuration, get_feature_info
from curachef.core.schemas import NutritionInfo, PlanMeal, Recipe, RecipeList, User, UserPreferences
from curachef.errors import CurachefError, NotAGenerationFeature, ValidationError
from curachef.generation import invoker
from curachef.llm.client import ImageData
from curachef.session.state import (
    INITIAL_STATE,
    ClearError,
    GenerationComplete,
    GenerationError,
    GenerationProgress,
    GenerationStart,
    ImageProcessingComplete,
    ImageProcessingStart,
    IngredientsIdentified,
    ReportError,
    SelectFeature,
    SessionAction,
    SessionState,
    SetCondition,
    SetImage,
    SetTextInput,
    SignOutReset,
    ToggleMobileMenu,
    reduce,
)

logger = logging.getLogger(__name__)

SIGN_IN_REQUIRED = "Please sign in to generate content."
SIGN_IN_REQUIRED_PLAN = "Please sign in to generate a plan."
INPUT_REQUIRED = "Please provide some input before generating."
CONDITION_REQUIRED = "Please select a medical condition for the dietary plan."
ALREADY_GENERATING = "A generation is already in progress for this feature."


class CurachefSession:
    """
    One user's session: auth plus the feature state machine.

    `state` is replaced on every dispatch; callers may hold on to old
    snapshots safely.
    """

    def __init__(self, auth: AuthService | None = None, state: SessionState = INITIAL_STATE):
        self.auth = auth or AuthService()
        self.state = state
        self.last_error: CurachefError | None = None

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    def dispatch(self, action: SessionAction) -> SessionState:
        logger.debug(f"dispatch {action.type}")
        self.state = reduce(self.state, action)
        return self.state

    def _fail(self, error: CurachefError) -> SessionState:
        self.last_error = error
        return self.dispatch(ReportError(message=error.message))

    @property
    def current_user(self) -> User | None:
        return self.auth.current_user

    @property
    def preferences(self) -> UserPreferences:
        user = self.auth.current_user
        return user.preferences if user else UserPreferences()

    # -------------------------------------------------------------------------
    # Simple input actions
    # -------------------------------------------------------------------------

    def select_feature(self, feature: Feature) -> SessionState:
        return self.dispatch(SelectFeature(feature=feature))

    def set_text_input(self, text: str) -> SessionState:
        return self.dispatch(SetTextInput(text=text))

    def set_condition(self, condition: MedicalCondition) -> SessionState:
        return self.dispatch(SetCondition(condition=condition))

    def toggle_mobile_menu(self, open: bool) -> SessionState:
        return self.dispatch(ToggleMobileMenu(open=open))

    def dismiss_error(self) -> SessionState:
        self.last_error = None
        return self.dispatch(ClearError())

    def sign_out(self) -> SessionState:
        """Sign out and discard every feature slot."""
        self.auth.sign_out()
        self.last_error = None
        return self.dispatch(SignOutReset())

    # -------------------------------------------------------------------------
    # Submit
    # -------------------------------------------------------------------------

    def validate_submit(self) -> None:
        """
        Check the active feature can be submitted.

        Raises:
            ValidationError: Not signed in, empty input, missing condition or busy
            NotAGenerationFeature: Active feature never generates
        """
        state = self.state
        info = get_feature_info(state.active_feature)

        if not info.generates:
            raise NotAGenerationFeature("This feature does not generate content directly.")
        if not self.auth.is_signed_in:
            raise ValidationError(SIGN_IN_REQUIRED)
        if not state.text_input.strip():
            raise ValidationError(INPUT_REQUIRED)
        if (
            state.active_feature == Feature.MEDICAL_DIETARY_PLANNER
            and state.selected_condition == MedicalCondition.NONE
        ):
            raise ValidationError(CONDITION_REQUIRED)
        if state.is_generating(state.active_feature):
            raise ValidationError(ALREADY_GENERATING)

    async def submit(self) -> SessionState:
        """
        Generate for the active feature.

        Validation failures and generation failures both end in the error
        state; the caller reads `state.error` (and `last_error` for the kind).
        """
        try:
            self.validate_submit()
        except CurachefError as e:
            return self._fail(e)

        state = self.state
        feature = state.active_feature
        text_input = state.text_input
        condition = state.selected_condition
        preferences = self.preferences
        info = get_feature_info(feature)

        self.last_error = None
        self.dispatch(GenerationStart(feature=feature))

        def on_recipes(recipes: list[Recipe]) -> None:
            self.dispatch(GenerationComplete(feature=feature, outcome=RecipeList(recipes=recipes)))

        try:
            if feature == Feature.MEDICAL_DIETARY_PLANNER:
                # Guidance must land before the recipes stream is issued
                plan = await invoker.generate_content(
                    feature, text_input, condition, None, preferences,
                )
                self.dispatch(GenerationProgress(feature=feature, outcome=plan))
                await invoker.generate_recipes_stream(
                    feature, text_input, condition, preferences, on_complete=on_recipes,
                )
            elif info.streams:
                await invoker.generate_recipes_stream(
                    feature, text_input, condition, preferences, on_complete=on_recipes,
                )
            else:
                result = await invoker.generate_content(
                    feature, text_input, condition, self._current_image(), preferences,
                )
                self.dispatch(GenerationComplete(feature=feature, outcome=result))
        except CurachefError as e:
            logger.warning(f"Generation failed for {feature.value}: {e.message}")
            self.last_error = e
            return self.dispatch(GenerationError(feature=feature, message=e.message))

        return self.state

    async def generate_plan(self, duration: PlanDuration = PlanDuration.WEEKLY) -> SessionState:
        """Generate a personalized plan from the user's preferences."""
        feature = Feature.PERSONALIZED_DIETARY_PLANNER

        if not self.auth.is_signed_in:
            return self._fail(ValidationError(SIGN_IN_REQUIRED_PLAN))
        if self.state.is_generating(feature):
            return self._fail(ValidationError(ALREADY_GENERATING))

        self.last_error = None
        self.dispatch(GenerationStart(feature=feature))
        try:
            plan = await invoker.generate_content(
                feature, "", MedicalCondition.NONE, None, self.preferences, duration,
            )
        except CurachefError as e:
            logger.warning(f"Plan generation failed: {e.message}")
            self.last_error = e
            return self.dispatch(GenerationError(feature=feature, message=e.message))

        return self.dispatch(GenerationComplete(feature=feature, outcome=plan))

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    def _current_image(self) -> ImageData | None:
        if not self.state.image_base64:
            return None
        return ImageData.from_base64(self.state.image_base64, self.state.image_mime_type)

    async def attach_image(self, image: ImageData | None) -> SessionState:
        """
        Attach (or clear) an image and identify its ingredients.

        On success the text input is replaced with the ingredients. Loading
        ends whether identification succeeds or not.
        """
        if image is None:
            return self.dispatch(SetImage(image_base64=None))

        self.dispatch(SetImage(
            image_base64=base64.b64encode(image.data).decode("ascii"),
            mime_type=image.mime_type,
        ))
        self.dispatch(ImageProcessingStart())
        try:
            ingredients = await invoker.identify_ingredients(image)
            self.dispatch(IngredientsIdentified(ingredients=ingredients))
        except CurachefError as e:
            self._fail(e)
        finally:
            self.dispatch(ImageProcessingComplete())

        return self.state

    # -------------------------------------------------------------------------
    # On-demand details (outside the feature slots)
    # -------------------------------------------------------------------------

    async def expand_meal(self, meal: PlanMeal) -> Recipe:
        """Full recipe for one plan meal. Raises GenerationFailed."""
        return await invoker.generate_recipe_for_plan(
            meal.recipe.title, meal.recipe.description, self.preferences,
        )

    async def recipe_nutrition(self, recipe: Recipe) -> NutritionInfo:
        """Nutrition for one recipe. Raises GenerationFailed."""
        return await invoker.generate_nutrition_for_recipe(recipe)
