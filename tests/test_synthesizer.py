"""Tests for profile synthesis from a completed response map."""

from __future__ import annotations

import pytest

import src.settings as settings
from src.errors import IncompleteProfileError
from src.models.responses import Response
from src.scoring.synthesizer import (
    communication_style_for,
    content_configuration,
    partial_type_code,
    resolve_mbti_type,
    synthesize_profile,
    wellness_configuration,
)


def _responses(**overrides: Response) -> dict[str, Response]:
    base = {
        "name": Response.single("  Sam "),
        "mbti_know": Response.single("No, I'm not sure"),
        "mbti_ei": Response.single("E"),
        "mbti_sn": Response.single("N"),
        "mbti_tf": Response.single("F"),
        "mbti_jp": Response.single("P"),
        "perma_positiveEmotion": Response.slider(9),
        "perma_engagement": Response.slider(4),
        "perma_relationships": Response.slider(8),
        "perma_meaning": Response.slider(5),
        "perma_accomplishment": Response.slider(9),
    }
    base.update(overrides)
    return base


class TestMbtiResolution:
    def test_letters_resolve_to_enfp(self):
        assert synthesize_profile(_responses()).mbti_type == "ENFP"

    def test_option_text_resolves(self):
        responses = _responses(
            mbti_ei=Response.single("Enjoying peaceful moments alone to recharge"),
            mbti_sn=Response.single("experiencing real, tangible things and details"),
            mbti_tf=Response.single("Logical reasons and facts"),
            mbti_jp=Response.single("Having a clear plan and routine"),
        )
        assert resolve_mbti_type(responses) == "ISTJ"

    def test_direct_entry_wins(self):
        responses = _responses(mbti_input=Response.single("infj"))
        assert resolve_mbti_type(responses) == "INFJ"

    def test_invalid_direct_entry_falls_back_to_dimensions(self):
        responses = _responses(mbti_input=Response.single("xyz1"))
        assert resolve_mbti_type(responses) == "ENFP"

    def test_missing_dimension_raises(self):
        responses = _responses()
        del responses["mbti_tf"]
        with pytest.raises(IncompleteProfileError, match="mbti_tf"):
            synthesize_profile(responses)

    def test_unrecognised_dimension_answer_raises(self):
        with pytest.raises(IncompleteProfileError, match="mbti_ei"):
            resolve_mbti_type(_responses(mbti_ei=Response.single("Maybe")))

    def test_partial_type_code(self):
        responses = _responses()
        del responses["mbti_sn"]
        del responses["mbti_jp"]
        assert partial_type_code(responses) == "E_F_"


class TestPerma:
    def test_scores_copied_unchanged(self):
        profile = synthesize_profile(_responses(perma_meaning=Response.slider(5.5)))
        assert profile.perma_scores == {
            "positiveEmotion": 9,
            "engagement": 4,
            "relationships": 8,
            "meaning": 5.5,
            "accomplishment": 9,
        }

    def test_missing_slider_raises(self):
        responses = _responses()
        del responses["perma_relationships"]
        with pytest.raises(IncompleteProfileError, match="relationships"):
            synthesize_profile(responses)

    def test_details_captured(self):
        profile = synthesize_profile(
            _responses(
                perma_flow_activity=Response.single(" Painting "),
                perma_meaning_sources=Response.multi(["Family", "family", "Nature"]),
            )
        )
        assert profile.perma_details == {
            "engagement": "Painting",
            "meaning": ("Family", "Nature"),
        }


class TestPreferences:
    def test_name_trimmed(self):
        assert synthesize_profile(_responses()).name == "Sam"

    def test_interests_normalised(self):
        profile = synthesize_profile(
            _responses(primary_interests=Response.multi([" Music", "music", "Travel", ""]))
        )
        assert profile.interests == ("Music", "Travel")

    def test_display_interests_capped(self, monkeypatch):
        many = [f"Interest {i}" for i in range(8)]
        profile = synthesize_profile(_responses(primary_interests=Response.multi(many)))
        assert len(profile.interests) == 8
        assert profile.display_interests == tuple(many[:5])

        monkeypatch.setenv("INTEREST_DISPLAY_LIMIT", "2")
        settings.reset()
        try:
            assert profile.display_interests == tuple(many[:2])
        finally:
            monkeypatch.delenv("INTEREST_DISPLAY_LIMIT", raising=False)
            settings.reset()

    def test_goals_and_primary_goal(self):
        profile = synthesize_profile(
            _responses(main_goals=Response.multi(["Reduce stress", "Sleep better"]))
        )
        assert profile.goals == ("Reduce stress", "Sleep better")
        assert profile.primary_goal == "Reduce stress"

    def test_no_goals(self):
        profile = synthesize_profile(_responses())
        assert profile.goals == ()
        assert profile.primary_goal == ""

    @pytest.mark.parametrize(
        "answer, level",
        [
            ("Small, gentle steps that feel manageable", "low"),
            ("Moderate challenges that push me a bit", "medium"),
            ("Big challenges that really stretch me", "high"),
        ],
    )
    def test_challenge_level(self, answer, level):
        profile = synthesize_profile(_responses(challenge_preference=Response.single(answer)))
        assert profile.challenge_level == level

    def test_challenge_level_defaults_to_medium(self):
        assert synthesize_profile(_responses()).challenge_level == "medium"


class TestCommunicationStyle:
    @pytest.mark.parametrize(
        "code, style",
        [("ENTJ", "direct"), ("INTP", "analytical"), ("ENFP", "supportive"), ("ISFJ", "creative")],
    )
    def test_style_by_type(self, code, style):
        assert communication_style_for(code) == style


class TestPurity:
    def test_same_input_same_profile(self):
        responses = _responses()
        assert synthesize_profile(responses) == synthesize_profile(responses)

    def test_input_not_modified(self):
        responses = _responses()
        before = dict(responses)
        synthesize_profile(responses)
        assert responses == before


class TestViews:
    def test_wellness_configuration(self):
        profile = synthesize_profile(
            _responses(main_goals=Response.multi(["Reduce stress"]))
        )
        view = wellness_configuration(profile)
        assert view["perma_scores"]["engagement"] == 4
        assert view["primary_goal"] == "Reduce stress"
        assert view["challenge_level"] == "medium"

    def test_content_configuration(self):
        profile = synthesize_profile(_responses())
        assert content_configuration(profile) == {
            "mbti_type": "ENFP",
            "interests": [],
            "communication_style": "supportive",
        }

    def test_to_dict_is_plain(self):
        profile = synthesize_profile(
            _responses(perma_meaning_sources=Response.multi(["Nature"]))
        )
        data = profile.to_dict()
        assert data["perma_details"]["meaning"] == ["Nature"]
        assert isinstance(data["interests"], list)
