from __future__ import annotations

import pytest
from pydantic import ValidationError

from psi_exporter.schemas.pagespeed import PageSpeedResponse


def test_decodes_consumed_fields(psi_payload) -> None:
    report = PageSpeedResponse.model_validate(psi_payload(score=0.42))

    assert report.performance_score == 0.42
    assert report.audit_value("first-contentful-paint") == 1200.5
    assert report.audit_value("total-blocking-time") == 150.0


def test_absent_and_malformed_audits_decode_to_none(psi_payload) -> None:
    report = PageSpeedResponse.model_validate(
        psi_payload(
            audits={
                "first-contentful-paint": None,
                "largest-contentful-paint": {"numericValue": [1, 2]},
                "total-blocking-time": {"numericValue": True},
            }
        )
    )

    assert report.audit_value("first-contentful-paint") is None
    assert report.audit_value("largest-contentful-paint") is None
    assert report.audit_value("total-blocking-time") is None
    assert report.audit_value("cumulative-layout-shift") is None


def test_integer_values_are_accepted(psi_payload) -> None:
    report = PageSpeedResponse.model_validate(
        psi_payload(score=1, audits={"total-blocking-time": {"numericValue": 0}})
    )

    assert report.performance_score == 1.0
    assert report.audit_value("total-blocking-time") == 0.0


def test_unrelated_fields_are_ignored(psi_payload) -> None:
    payload = psi_payload()
    payload["loadingExperience"] = {"overall_category": "FAST"}
    payload["lighthouseResult"]["categories"]["accessibility"] = {"score": "n/a"}

    assert PageSpeedResponse.model_validate(payload).performance_score == 0.9


@pytest.mark.parametrize(
    "payload",
    [
        {"lighthouseResult": {"audits": {}}},
        {"lighthouseResult": {"categories": {"performance": {"score": 0.9}}, "audits": "none"}},
        {"lighthouseResult": {"categories": {"performance": "high"}, "audits": {}}},
    ],
)
def test_missing_envelope_fails_validation(payload) -> None:
    with pytest.raises(ValidationError):
        PageSpeedResponse.model_validate(payload)
