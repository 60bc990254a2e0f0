import pytest

from muac.reference_data import (
    MUAC_CODE_GREEN,
    MUAC_CODE_RED,
    MUAC_CODE_YELLOW,
    MUAC_CODES,
    BandThresholds,
    baseline_faqs,
    baseline_recommendations,
    baseline_roles,
    baseline_tags,
    classify_muac,
)

THRESHOLDS = BandThresholds(severe=11.5, moderate=12.4, normal=12.5)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (8.0, MUAC_CODE_RED),
        (11.49, MUAC_CODE_RED),
        (11.5, MUAC_CODE_YELLOW),
        (12.4, MUAC_CODE_YELLOW),
        (12.45, MUAC_CODE_YELLOW),
        (12.5, MUAC_CODE_GREEN),
        (16.0, MUAC_CODE_GREEN),
        (50.0, MUAC_CODE_GREEN),
    ],
)
def test_classify_muac_band_boundaries(value, expected):
    assert classify_muac(value, THRESHOLDS) == expected


@pytest.mark.parametrize("value", [0.0, -3.0, 50.1])
def test_classify_muac_rejects_out_of_range_values(value):
    with pytest.raises(ValueError):
        classify_muac(value, THRESHOLDS)


def test_classify_muac_follows_configured_thresholds():
    custom = BandThresholds(severe=11.0, moderate=12.0, normal=13.0)
    assert classify_muac(11.2, custom) == MUAC_CODE_YELLOW
    assert classify_muac(12.7, custom) == MUAC_CODE_YELLOW
    assert classify_muac(13.0, custom) == MUAC_CODE_GREEN


def test_baseline_records_cover_every_code_once():
    tags = baseline_tags(THRESHOLDS)
    recommendations = baseline_recommendations(THRESHOLDS)

    assert sorted(tag["muac_code"] for tag in tags) == sorted(MUAC_CODES)
    assert sorted(rec["muac_code"] for rec in recommendations) == sorted(MUAC_CODES)
    assert len({tag["name"] for tag in tags}) == len(tags)
    assert len({rec["name"] for rec in recommendations}) == len(recommendations)
    assert [role["name"] for role in baseline_roles()] == ["ADMINISTRADOR", "SUPERVISOR", "APODERADO"]


def test_recommendation_bounds_follow_thresholds():
    by_code = {rec["muac_code"]: rec for rec in baseline_recommendations(THRESHOLDS)}

    assert by_code[MUAC_CODE_RED]["min_value"] is None
    assert by_code[MUAC_CODE_RED]["max_value"] == 11.5
    assert by_code[MUAC_CODE_YELLOW]["min_value"] == 11.5
    assert by_code[MUAC_CODE_YELLOW]["max_value"] == 12.4
    assert by_code[MUAC_CODE_GREEN]["min_value"] == 12.5
    assert by_code[MUAC_CODE_GREEN]["max_value"] is None
    assert by_code[MUAC_CODE_RED]["recommendation_umbral"] == "< 11.5 cm"
    assert by_code[MUAC_CODE_YELLOW]["recommendation_umbral"] == "11.5 - 12.4 cm"
    assert by_code[MUAC_CODE_GREEN]["recommendation_umbral"] == "≥ 12.5 cm"


def test_faq_natural_keys_are_unique():
    keys = [(faq["category"], faq["question"]) for faq in baseline_faqs()]
    assert len(keys) == len(set(keys))
    assert all(faq["answer"] for faq in baseline_faqs())
