"""Tests for the question catalog: ordering, lookups, and load-time validation."""

from __future__ import annotations

import copy
import json

import pytest

import src.settings as settings
from src.catalog.questions import (
    DIMENSION_QUESTION_IDS,
    DIRECT_ENTRY_QUESTION_ID,
    GATING_QUESTION_ID,
    get_catalog,
    load_catalog,
    parse_catalog,
    reset,
)
from src.errors import UnknownQuestionError
from src.paths import CATALOG_PATH


def _raw_catalog() -> dict:
    with open(CATALOG_PATH, encoding="utf-8") as f:
        return json.load(f)


class TestBundledCatalog:
    """The shipped data/questions.json asset."""

    def test_loads_and_is_versioned(self):
        catalog = get_catalog()
        assert catalog.version == "3.0"
        assert catalog.total() == len(catalog) == 20

    def test_first_question_is_name(self):
        assert get_catalog().first().id == "name"

    def test_ids_are_unique(self):
        ids = [q.id for q in get_catalog()]
        assert len(ids) == len(set(ids))

    def test_dimension_questions_in_order(self):
        catalog = get_catalog()
        indices = [catalog.index_of(qid) for qid in DIMENSION_QUESTION_IDS]
        assert indices == sorted(indices)
        assert catalog.index_of(GATING_QUESTION_ID) < indices[0]

    def test_question_at_matches_index_of(self):
        catalog = get_catalog()
        for i, question in enumerate(catalog):
            assert catalog.question_at(i) is question
            assert catalog.index_of(question.id) == i

    def test_sliders_have_zero_to_ten_scale(self):
        sliders = [q for q in get_catalog() if q.kind == "slider"]
        assert len(sliders) == 5
        assert all(q.scale == (0.0, 10.0) for q in sliders)

    def test_to_dict_includes_options_only_for_selects(self):
        catalog = get_catalog()
        assert "options" in catalog.get(GATING_QUESTION_ID).to_dict()
        assert "options" not in catalog.get("name").to_dict()
        assert catalog.get("perma_meaning").to_dict()["scale"] == [0.0, 10.0]


class TestLookups:
    def test_unknown_id_raises(self):
        with pytest.raises(UnknownQuestionError, match="nope"):
            get_catalog().get("nope")

    def test_unknown_error_is_a_key_error(self):
        with pytest.raises(KeyError):
            get_catalog().index_of("nope")

    def test_question_at_out_of_range(self):
        catalog = get_catalog()
        with pytest.raises(UnknownQuestionError):
            catalog.question_at(catalog.total())

    def test_contains(self):
        catalog = get_catalog()
        assert "mbti_ei" in catalog
        assert "nope" not in catalog

    def test_is_conditional(self):
        catalog = get_catalog()
        assert all(catalog.is_conditional(qid) for qid in DIMENSION_QUESTION_IDS)
        assert not catalog.is_conditional(GATING_QUESTION_ID)
        with pytest.raises(UnknownQuestionError):
            catalog.is_conditional("nope")


class TestNextEligible:
    def test_plain_order(self):
        catalog = get_catalog()
        assert catalog.next_eligible("name", skip_conditional=False).id == GATING_QUESTION_ID

    def test_direct_entry_is_never_reached_in_order(self):
        catalog = get_catalog()
        nxt = catalog.next_eligible(GATING_QUESTION_ID, skip_conditional=False)
        assert nxt.id == DIMENSION_QUESTION_IDS[0]

    def test_skips_dimension_questions_when_flagged(self):
        catalog = get_catalog()
        nxt = catalog.next_eligible(DIRECT_ENTRY_QUESTION_ID, skip_conditional=True)
        assert nxt.id == "perma_positiveEmotion"

    def test_none_at_end(self):
        catalog = get_catalog()
        last = catalog.question_at(catalog.total() - 1)
        assert catalog.next_eligible(last.id, skip_conditional=False) is None

    def test_unknown_after_id_raises(self):
        with pytest.raises(UnknownQuestionError):
            get_catalog().next_eligible("nope", skip_conditional=False)


class TestValidation:
    """A broken asset fails at load time with a clear message."""

    def test_duplicate_id(self):
        data = _raw_catalog()
        data["questions"].append(copy.deepcopy(data["questions"][0]))
        with pytest.raises(ValueError, match="Duplicate"):
            parse_catalog(data)

    def test_unknown_kind(self):
        data = _raw_catalog()
        data["questions"][0]["kind"] = "essay"
        with pytest.raises(ValueError, match="unknown kind"):
            parse_catalog(data)

    def test_select_needs_two_options(self):
        data = _raw_catalog()
        data["questions"][1]["options"] = ["Only one"]
        with pytest.raises(ValueError, match="two options"):
            parse_catalog(data)

    def test_slider_scale_must_increase(self):
        data = _raw_catalog()
        slider = next(q for q in data["questions"] if q["kind"] == "slider")
        slider["scale"] = [10, 0]
        with pytest.raises(ValueError, match="scale"):
            parse_catalog(data)

    def test_perma_slider_scale_capped_at_ten(self):
        data = _raw_catalog()
        for q in data["questions"]:
            if q["id"].startswith("perma_") and q["kind"] == "slider":
                q["scale"] = [0, 100]
        with pytest.raises(ValueError, match="outside"):
            parse_catalog(data)

    def test_perma_slider_scale_cannot_go_negative(self):
        data = _raw_catalog()
        slider = next(q for q in data["questions"] if q["id"] == "perma_meaning")
        slider["scale"] = [-5, 10]
        with pytest.raises(ValueError, match="perma_meaning"):
            parse_catalog(data)

    def test_perma_slider_narrower_scale_allowed(self):
        data = _raw_catalog()
        slider = next(q for q in data["questions"] if q["id"] == "perma_meaning")
        slider["scale"] = [1, 5]
        assert parse_catalog(data).get("perma_meaning").scale == (1.0, 5.0)

    def test_missing_required_question(self):
        data = _raw_catalog()
        data["questions"] = [q for q in data["questions"] if q["id"] != "mbti_sn"]
        with pytest.raises(ValueError, match="mbti_sn"):
            parse_catalog(data)

    def test_dimension_needs_letter_per_option(self):
        data = _raw_catalog()
        dim = next(q for q in data["questions"] if q["id"] == "mbti_tf")
        dim["resolves"] = ["T"]
        with pytest.raises(ValueError, match="mbti_tf"):
            parse_catalog(data)

    def test_missing_field(self):
        data = _raw_catalog()
        del data["questions"][0]["prompt"]
        with pytest.raises(ValueError, match="Malformed"):
            parse_catalog(data)

    def test_empty_catalog(self):
        with pytest.raises(ValueError, match="empty"):
            parse_catalog({"version": "3.0", "questions": []})


class TestLoading:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="parsing"):
            load_catalog(path)

    def test_catalog_path_from_env(self, tmp_path, monkeypatch):
        data = _raw_catalog()
        data["version"] = "9.9"
        path = tmp_path / "custom.json"
        path.write_text(json.dumps(data), encoding="utf-8")

        monkeypatch.setenv("QUESTION_CATALOG_PATH", str(path))
        settings.reset()
        reset()
        try:
            assert get_catalog().version == "9.9"
        finally:
            monkeypatch.delenv("QUESTION_CATALOG_PATH", raising=False)
            settings.reset()
            reset()
        assert get_catalog().version == "3.0"

    def test_catalog_path_with_wide_perma_scale_rejected(self, tmp_path, monkeypatch):
        data = _raw_catalog()
        for q in data["questions"]:
            if q["id"].startswith("perma_") and q["kind"] == "slider":
                q["scale"] = [0, 100]
        path = tmp_path / "wide.json"
        path.write_text(json.dumps(data), encoding="utf-8")

        monkeypatch.setenv("QUESTION_CATALOG_PATH", str(path))
        settings.reset()
        reset()
        try:
            with pytest.raises(ValueError, match="outside"):
                get_catalog()
        finally:
            monkeypatch.delenv("QUESTION_CATALOG_PATH", raising=False)
            settings.reset()
            reset()
        assert all(
            get_catalog().get(f"perma_{dim}").scale == (0.0, 10.0)
            for dim in ("positiveEmotion", "engagement", "relationships", "meaning", "accomplishment")
        )
