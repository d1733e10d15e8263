"""
Tests for the session controller.

The invoker is patched at module level; the reducer and reconciler run
for real so each test observes the resulting SessionState.
"""

import asyncio
import base64
from unittest.mock import AsyncMock, patch

import pytest

from curachef.auth import AuthService
from curachef.core.features import Feature, MedicalCondition, PlanDuration
from curachef.core.schemas import DietaryPlan, NutritionInfo, PersonalizedPlan, PlanMeal, RecipeStub
from curachef.errors import GenerationFailed, NotAGenerationFeature, ValidationError
from curachef.llm.client import ImageData
from curachef.session import CurachefSession
from curachef.session.controller import (
    ALREADY_GENERATING,
    CONDITION_REQUIRED,
    INPUT_REQUIRED,
    SIGN_IN_REQUIRED,
    SIGN_IN_REQUIRED_PLAN,
)
from curachef.session.state import GenerationStart


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def _streaming(recipes):
    """Stand-in for generate_recipes_stream that delivers `recipes`."""

    async def fake(feature, text_input, condition=MedicalCondition.NONE, preferences=None, on_complete=None):
        if on_complete is not None:
            on_complete(recipes)
        return recipes

    return AsyncMock(side_effect=fake)


@pytest.fixture
def session(user_store, signed_in_user):
    auth = AuthService(store=user_store)
    auth.current_user = signed_in_user
    return CurachefSession(auth=auth)


@pytest.fixture
def anonymous_session(user_store):
    return CurachefSession(auth=AuthService(store=user_store))


class TestValidation:
    def test_signed_out_submit(self, anonymous_session):
        anonymous_session.set_text_input("rice")

        with patch("curachef.generation.invoker.generate_recipes_stream", new_callable=AsyncMock) as mock_stream:
            state = _run(anonymous_session.submit())

        mock_stream.assert_not_called()
        assert state.error == SIGN_IN_REQUIRED
        assert isinstance(anonymous_session.last_error, ValidationError)
        assert not state.generating

    def test_blank_input(self, session):
        session.set_text_input("   ")

        with patch("curachef.generation.invoker.generate_recipes_stream", new_callable=AsyncMock) as mock_stream:
            state = _run(session.submit())

        mock_stream.assert_not_called()
        assert state.error == INPUT_REQUIRED

    def test_medical_requires_condition(self, session):
        session.select_feature(Feature.MEDICAL_DIETARY_PLANNER)
        session.set_text_input("oats")

        with patch("curachef.generation.invoker.generate_content", new_callable=AsyncMock) as mock_content:
            state = _run(session.submit())

        mock_content.assert_not_called()
        assert state.error == CONDITION_REQUIRED

    def test_preferences_feature_does_not_generate(self, session):
        session.select_feature(Feature.USER_PREFERENCES)

        with pytest.raises(NotAGenerationFeature):
            session.validate_submit()

        state = _run(session.submit())
        assert state.error == "This feature does not generate content directly."

    def test_busy_feature_rejected(self, session):
        session.set_text_input("rice")
        session.dispatch(GenerationStart(feature=Feature.RECIPE_GENERATOR))

        with pytest.raises(ValidationError) as exc_info:
            session.validate_submit()
        assert exc_info.value.message == ALREADY_GENERATING

    def test_validation_keeps_slot(self, session, sample_recipe):
        session.set_text_input("rice")
        with patch("curachef.generation.invoker.generate_recipes_stream", _streaming([sample_recipe])):
            _run(session.submit())

        session.set_text_input("")
        state = _run(session.submit())

        assert state.error == INPUT_REQUIRED
        assert state.active_result.recipes == [sample_recipe]


class TestRecipeFeatures:
    def test_recipe_generator(self, session, sample_recipe, sample_preferences):
        session.set_text_input("chicken, rice, broccoli")

        mock_stream = _streaming([sample_recipe])
        with patch("curachef.generation.invoker.generate_recipes_stream", mock_stream):
            state = _run(session.submit())

        assert state.error is None
        assert not state.generating
        assert state.active_result.recipes == [sample_recipe]

        args = mock_stream.call_args.args
        assert args[0] == Feature.RECIPE_GENERATOR
        assert args[1] == "chicken, rice, broccoli"
        assert args[3] == sample_preferences

    def test_stream_failure(self, session):
        session.select_feature(Feature.LEFTOVER_RECOMMENDER)
        session.set_text_input("pizza")

        with patch("curachef.generation.invoker.generate_recipes_stream", new_callable=AsyncMock) as mock_stream:
            mock_stream.side_effect = GenerationFailed("Failed to stream recipes from AI.")
            state = _run(session.submit())

        assert state.error == "Failed to stream recipes from AI."
        assert state.active_result.is_empty()
        assert not state.generating
        assert isinstance(session.last_error, GenerationFailed)

    def test_slot_isolation(self, session, sample_recipe):
        session.set_text_input("rice")
        with patch("curachef.generation.invoker.generate_recipes_stream", _streaming([sample_recipe])):
            _run(session.submit())

        session.select_feature(Feature.LEFTOVER_RECOMMENDER)
        session.set_text_input("pizza")
        with patch("curachef.generation.invoker.generate_recipes_stream", new_callable=AsyncMock) as mock_stream:
            mock_stream.side_effect = GenerationFailed("Failed to stream recipes from AI.")
            state = _run(session.submit())

        assert state.result_for(Feature.RECIPE_GENERATOR).recipes == [sample_recipe]
        assert state.result_for(Feature.LEFTOVER_RECOMMENDER).is_empty()


class TestNutritionalAnalyzer:
    def test_analyze_with_image(self, session, sample_nutrition_data):
        info = NutritionInfo.model_validate(sample_nutrition_data)
        session.select_feature(Feature.NUTRITIONAL_ANALYZER)
        session.set_text_input("chicken salad")
        session.state = session.state.model_copy(update={
            "image_base64": base64.b64encode(b"jpeg").decode(),
            "image_mime_type": "image/png",
        })

        with patch("curachef.generation.invoker.generate_content", new_callable=AsyncMock) as mock_content:
            mock_content.return_value = info
            state = _run(session.submit())

        assert state.active_result.nutrition_info == info
        image = mock_content.call_args.args[3]
        assert image == ImageData(data=b"jpeg", mime_type="image/png")


class TestMedicalPlanner:
    def test_guidance_then_recipes(self, session, sample_dietary_plan_data, sample_recipe):
        plan = DietaryPlan.model_validate({**sample_dietary_plan_data, "recipes": []})
        session.select_feature(Feature.MEDICAL_DIETARY_PLANNER)
        session.set_condition(MedicalCondition.TYPE_2_DIABETES)
        session.set_text_input("oats, lentils")

        order = []

        async def content(*args, **kwargs):
            order.append("guidance")
            return plan

        async def stream(feature, text_input, condition, preferences, on_complete=None):
            order.append("recipes")
            # Guidance is already visible while recipes are in flight
            slot = session.state.result_for(Feature.MEDICAL_DIETARY_PLANNER)
            assert slot.dietary_plan.condition == "Type 2 Diabetes"
            assert session.state.is_generating(Feature.MEDICAL_DIETARY_PLANNER)
            on_complete([sample_recipe])
            return [sample_recipe]

        with patch("curachef.generation.invoker.generate_content", AsyncMock(side_effect=content)), \
             patch("curachef.generation.invoker.generate_recipes_stream", AsyncMock(side_effect=stream)):
            state = _run(session.submit())

        assert order == ["guidance", "recipes"]
        result = state.active_result.dietary_plan
        assert result.condition == "Type 2 Diabetes"
        assert result.foods_to_favor == ["leafy greens", "legumes"]
        assert result.recipes == [sample_recipe]
        assert not state.generating

    def test_guidance_failure_skips_stream(self, session):
        session.select_feature(Feature.MEDICAL_DIETARY_PLANNER)
        session.set_condition(MedicalCondition.HYPERTENSION)
        session.set_text_input("oats")

        with patch("curachef.generation.invoker.generate_content", new_callable=AsyncMock) as mock_content, \
             patch("curachef.generation.invoker.generate_recipes_stream", new_callable=AsyncMock) as mock_stream:
            mock_content.side_effect = GenerationFailed("Failed to parse response from AI.")
            state = _run(session.submit())

        mock_stream.assert_not_called()
        assert state.error == "Failed to parse response from AI."
        assert state.active_result.is_empty()

    def test_stream_failure_after_guidance(self, session, sample_dietary_plan_data):
        plan = DietaryPlan.model_validate({**sample_dietary_plan_data, "recipes": []})
        session.select_feature(Feature.MEDICAL_DIETARY_PLANNER)
        session.set_condition(MedicalCondition.TYPE_2_DIABETES)
        session.set_text_input("oats")

        with patch("curachef.generation.invoker.generate_content", new_callable=AsyncMock) as mock_content, \
             patch("curachef.generation.invoker.generate_recipes_stream", new_callable=AsyncMock) as mock_stream:
            mock_content.return_value = plan
            mock_stream.side_effect = GenerationFailed("Failed to stream recipes from AI.")
            state = _run(session.submit())

        mock_stream.assert_called_once()
        assert state.error == "Failed to stream recipes from AI."
        assert state.active_result.is_empty()
        assert state.active_result.dietary_plan is None
        assert not state.generating
        assert isinstance(session.last_error, GenerationFailed)


class TestPersonalizedPlan:
    def test_generate_plan(self, session, sample_plan_data):
        plan = PersonalizedPlan.model_validate(sample_plan_data)

        with patch("curachef.generation.invoker.generate_content", new_callable=AsyncMock) as mock_content:
            mock_content.return_value = plan
            state = _run(session.generate_plan(PlanDuration.DAILY))

        assert state.result_for(Feature.PERSONALIZED_DIETARY_PLANNER).personalized_plan == plan
        args = mock_content.call_args.args
        assert args[0] == Feature.PERSONALIZED_DIETARY_PLANNER
        assert args[5] == PlanDuration.DAILY

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_submit_requires_text(self, session, text):
        session.select_feature(Feature.PERSONALIZED_DIETARY_PLANNER)
        session.set_text_input(text)

        with patch("curachef.generation.invoker.generate_content", new_callable=AsyncMock) as mock_content:
            state = _run(session.submit())

        mock_content.assert_not_called()
        assert state.error == INPUT_REQUIRED
        assert isinstance(session.last_error, ValidationError)
        assert not state.generating

    def test_submit_with_text(self, session, sample_plan_data):
        plan = PersonalizedPlan.model_validate(sample_plan_data)
        session.select_feature(Feature.PERSONALIZED_DIETARY_PLANNER)
        session.set_text_input("high protein, quick breakfasts")

        with patch("curachef.generation.invoker.generate_content", new_callable=AsyncMock) as mock_content:
            mock_content.return_value = plan
            state = _run(session.submit())

        assert state.error is None
        assert state.active_result.personalized_plan == plan
        assert mock_content.call_args.args[1] == "high protein, quick breakfasts"

    def test_signed_out(self, anonymous_session):
        with patch("curachef.generation.invoker.generate_content", new_callable=AsyncMock) as mock_content:
            state = _run(anonymous_session.generate_plan())

        mock_content.assert_not_called()
        assert state.error == SIGN_IN_REQUIRED_PLAN

    def test_failure_leaves_empty_slot(self, session):
        with patch("curachef.generation.invoker.generate_content", new_callable=AsyncMock) as mock_content:
            mock_content.side_effect = GenerationFailed("Failed to parse response from AI.")
            state = _run(session.generate_plan())

        assert state.result_for(Feature.PERSONALIZED_DIETARY_PLANNER).is_empty()
        assert state.error == "Failed to parse response from AI."


class TestAttachImage:
    def test_ingredients_replace_text(self, session):
        session.set_text_input("old text")

        with patch("curachef.generation.invoker.identify_ingredients", new_callable=AsyncMock) as mock_identify:
            mock_identify.return_value = "tomato, basil"
            state = _run(session.attach_image(ImageData(data=b"jpeg")))

        assert state.text_input == "tomato, basil"
        assert state.show_identified_message
        assert not state.is_processing_image
        assert state.image_base64 == base64.b64encode(b"jpeg").decode()

    def test_failure_ends_loading(self, session):
        with patch("curachef.generation.invoker.identify_ingredients", new_callable=AsyncMock) as mock_identify:
            mock_identify.side_effect = GenerationFailed("Failed to identify ingredients from the image.")
            state = _run(session.attach_image(ImageData(data=b"jpeg")))

        assert not state.is_processing_image
        assert state.error == "Failed to identify ingredients from the image."
        assert all(slot.is_empty() for slot in state.results.values())

    def test_clear_image(self, session):
        with patch("curachef.generation.invoker.identify_ingredients", new_callable=AsyncMock) as mock_identify:
            mock_identify.return_value = "egg"
            _run(session.attach_image(ImageData(data=b"jpeg")))
            state = _run(session.attach_image(None))

        assert state.image_base64 is None
        mock_identify.assert_called_once()


class TestDetailsAndSignOut:
    def test_expand_meal(self, session, sample_recipe, sample_preferences):
        meal = PlanMeal(name="Dinner", recipe=RecipeStub(title="Dal Tadka", description="Tempered lentils"))

        with patch("curachef.generation.invoker.generate_recipe_for_plan", new_callable=AsyncMock) as mock_expand:
            mock_expand.return_value = sample_recipe
            recipe = _run(session.expand_meal(meal))

        assert recipe is sample_recipe
        mock_expand.assert_called_once_with("Dal Tadka", "Tempered lentils", sample_preferences)

    def test_recipe_nutrition_raises_to_caller(self, session, sample_recipe):
        with patch("curachef.generation.invoker.generate_nutrition_for_recipe", new_callable=AsyncMock) as mock_nut:
            mock_nut.side_effect = GenerationFailed("Failed to generate nutritional information for the recipe.")

            with pytest.raises(GenerationFailed):
                _run(session.recipe_nutrition(sample_recipe))

        assert session.state.error is None

    def test_sign_out(self, session, sample_recipe):
        session.set_text_input("rice")
        with patch("curachef.generation.invoker.generate_recipes_stream", _streaming([sample_recipe])):
            _run(session.submit())

        state = session.sign_out()

        assert session.current_user is None
        assert all(slot.is_empty() for slot in state.results.values())
        assert state.text_input == ""

    def test_dismiss_error(self, anonymous_session):
        anonymous_session.set_text_input("rice")
        _run(anonymous_session.submit())

        state = anonymous_session.dismiss_error()
        assert state.error is None
        assert anonymous_session.last_error is None
