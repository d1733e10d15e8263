"""
Tests for the session reducer.
"""

import pytest

from curachef.core.features import Feature, MedicalCondition
from curachef.core.schemas import DietaryPlan, NutritionInfo, RecipeList
from curachef.session.reconciler import EMPTY_RESULT
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
    SetCondition,
    SetImage,
    SetTextInput,
    SignOutReset,
    ToggleMobileMenu,
    reduce,
)


def _apply(state, *actions):
    for action in actions:
        state = reduce(state, action)
    return state


class TestInitialState:
    def test_defaults(self):
        assert INITIAL_STATE.active_feature == Feature.RECIPE_GENERATOR
        assert INITIAL_STATE.text_input == ""
        assert INITIAL_STATE.generating == frozenset()
        assert INITIAL_STATE.error is None
        assert not INITIAL_STATE.is_loading

    def test_every_generation_feature_has_empty_slot(self):
        assert all(slot.is_empty() for slot in INITIAL_STATE.results.values())
        assert Feature.USER_PREFERENCES not in INITIAL_STATE.results


class TestInputActions:
    def test_select_feature_clears_inputs(self):
        state = _apply(
            INITIAL_STATE,
            SetTextInput(text="rice"),
            SetImage(image_base64="aGVsbG8="),
            SetCondition(condition=MedicalCondition.HYPERTENSION),
            ToggleMobileMenu(open=True),
            SelectFeature(feature=Feature.MEDICAL_DIETARY_PLANNER),
        )

        assert state.active_feature == Feature.MEDICAL_DIETARY_PLANNER
        assert state.text_input == ""
        assert state.image_base64 is None
        assert state.selected_condition == MedicalCondition.NONE
        assert state.is_mobile_menu_open is False

    def test_select_feature_keeps_results(self, sample_recipe):
        state = _apply(
            INITIAL_STATE,
            GenerationStart(feature=Feature.RECIPE_GENERATOR),
            GenerationComplete(feature=Feature.RECIPE_GENERATOR, outcome=RecipeList(recipes=[sample_recipe])),
            SelectFeature(feature=Feature.NUTRITIONAL_ANALYZER),
            SelectFeature(feature=Feature.RECIPE_GENERATOR),
        )
        assert state.active_result.recipes == [sample_recipe]

    def test_set_image_hides_identified_message(self):
        state = _apply(INITIAL_STATE, IngredientsIdentified(ingredients="tomato"), SetImage(image_base64=None))
        assert state.show_identified_message is False

    def test_editing_text_hides_identified_message(self):
        state = _apply(INITIAL_STATE, IngredientsIdentified(ingredients="tomato"))
        assert state.show_identified_message

        state = reduce(state, SetTextInput(text="tomato, onion"))
        assert state.text_input == "tomato, onion"
        assert state.show_identified_message is False

    def test_select_feature_hides_identified_message(self):
        state = _apply(
            INITIAL_STATE,
            IngredientsIdentified(ingredients="tomato"),
            SelectFeature(feature=Feature.RECIPE_GENERATOR),
        )
        assert state.show_identified_message is False

    def test_reducer_does_not_mutate(self):
        before = INITIAL_STATE
        after = reduce(before, SetTextInput(text="eggs"))
        assert before.text_input == ""
        assert after.text_input == "eggs"


class TestGenerationLifecycle:
    def test_start_marks_busy_and_resets_slot(self, sample_recipe):
        state = _apply(
            INITIAL_STATE,
            GenerationStart(feature=Feature.RECIPE_GENERATOR),
            GenerationComplete(feature=Feature.RECIPE_GENERATOR, outcome=RecipeList(recipes=[sample_recipe])),
            ReportError(message="old"),
            GenerationStart(feature=Feature.RECIPE_GENERATOR),
        )

        assert state.is_generating(Feature.RECIPE_GENERATOR)
        assert state.is_loading
        assert state.error is None
        assert state.result_for(Feature.RECIPE_GENERATOR) == EMPTY_RESULT

    def test_progress_keeps_busy(self, sample_dietary_plan_data):
        plan = DietaryPlan.model_validate(sample_dietary_plan_data)
        state = _apply(
            INITIAL_STATE,
            GenerationStart(feature=Feature.MEDICAL_DIETARY_PLANNER),
            GenerationProgress(feature=Feature.MEDICAL_DIETARY_PLANNER, outcome=plan),
        )

        assert state.is_generating(Feature.MEDICAL_DIETARY_PLANNER)
        assert state.result_for(Feature.MEDICAL_DIETARY_PLANNER).dietary_plan.condition == "Type 2 Diabetes"

    def test_complete_clears_busy(self, sample_nutrition_data):
        info = NutritionInfo.model_validate(sample_nutrition_data)
        state = _apply(
            INITIAL_STATE,
            GenerationStart(feature=Feature.NUTRITIONAL_ANALYZER),
            GenerationComplete(feature=Feature.NUTRITIONAL_ANALYZER, outcome=info),
        )

        assert not state.is_generating(Feature.NUTRITIONAL_ANALYZER)
        assert state.result_for(Feature.NUTRITIONAL_ANALYZER).nutrition_info == info

    def test_error_clears_busy_and_slot(self, sample_dietary_plan_data):
        plan = DietaryPlan.model_validate(sample_dietary_plan_data)
        state = _apply(
            INITIAL_STATE,
            GenerationStart(feature=Feature.MEDICAL_DIETARY_PLANNER),
            GenerationProgress(feature=Feature.MEDICAL_DIETARY_PLANNER, outcome=plan),
            GenerationError(feature=Feature.MEDICAL_DIETARY_PLANNER, message="Failed to stream recipes from AI."),
        )

        assert not state.generating
        assert state.error == "Failed to stream recipes from AI."
        assert state.result_for(Feature.MEDICAL_DIETARY_PLANNER).is_empty()

    def test_other_slots_untouched(self, sample_recipe):
        state = _apply(
            INITIAL_STATE,
            GenerationStart(feature=Feature.RECIPE_GENERATOR),
            GenerationComplete(feature=Feature.RECIPE_GENERATOR, outcome=RecipeList(recipes=[sample_recipe])),
            GenerationStart(feature=Feature.LEFTOVER_RECOMMENDER),
            GenerationError(feature=Feature.LEFTOVER_RECOMMENDER, message="boom"),
        )

        assert state.result_for(Feature.RECIPE_GENERATOR).recipes == [sample_recipe]
        for feature in (Feature.NUTRITIONAL_ANALYZER, Feature.MEDICAL_DIETARY_PLANNER):
            assert state.result_for(feature).is_empty()

    def test_busy_flags_are_per_feature(self):
        state = _apply(
            INITIAL_STATE,
            GenerationStart(feature=Feature.RECIPE_GENERATOR),
            GenerationStart(feature=Feature.NUTRITIONAL_ANALYZER),
            GenerationComplete(feature=Feature.NUTRITIONAL_ANALYZER),
        )
        assert state.generating == frozenset({Feature.RECIPE_GENERATOR})


class TestErrorsAndImages:
    def test_report_and_clear_error(self):
        state = reduce(INITIAL_STATE, ReportError(message="Please sign in to generate content."))
        assert state.error == "Please sign in to generate content."
        assert reduce(state, ClearError()).error is None

    def test_image_processing(self):
        state = _apply(
            INITIAL_STATE,
            ReportError(message="old"),
            ImageProcessingStart(),
        )
        assert state.is_processing_image
        assert state.is_loading
        assert state.error is None

        state = _apply(
            state,
            IngredientsIdentified(ingredients="tomato, basil"),
            ImageProcessingComplete(),
        )
        assert state.text_input == "tomato, basil"
        assert state.show_identified_message
        assert not state.is_processing_image

    def test_image_processing_does_not_touch_slots(self):
        state = _apply(INITIAL_STATE, ImageProcessingStart(), ImageProcessingComplete())
        assert state.results == INITIAL_STATE.results


class TestSignOutAndUnknown:
    def test_sign_out_resets_everything(self, sample_recipe):
        state = _apply(
            INITIAL_STATE,
            SelectFeature(feature=Feature.LEFTOVER_RECOMMENDER),
            SetTextInput(text="pizza"),
            GenerationStart(feature=Feature.LEFTOVER_RECOMMENDER),
            GenerationComplete(feature=Feature.LEFTOVER_RECOMMENDER, outcome=RecipeList(recipes=[sample_recipe])),
            SignOutReset(),
        )
        assert state == INITIAL_STATE

    def test_unknown_action(self):
        with pytest.raises(TypeError):
            reduce(INITIAL_STATE, object())
