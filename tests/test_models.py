"""Tests for the API payload models."""

from hindenrank_mcp.core.models import ApiResponse, ComparisonResult, Protocol


def test_protocol_keeps_unknown_fields(protocol_payload):
    protocol = Protocol.model_validate(protocol_payload(auditCount=4, chains=["ethereum"]))

    assert protocol.model_extra == {"auditCount": 4, "chains": ["ethereum"]}
    assert protocol.model_dump(by_alias=True)["chains"] == ["ethereum"]


def test_value_grade_presence_is_detected(protocol_payload):
    assert not Protocol.model_validate(protocol_payload()).has_value_grade

    with_value = Protocol.model_validate(protocol_payload(valueGrade="B", valueRawScore=64))
    assert with_value.has_value_grade
    assert with_value.value_raw_score == 64


def test_minimal_search_record():
    protocol = Protocol.model_validate({"slug": "lido", "name": "Lido"})

    assert protocol.tvl is None
    assert protocol.top_risks == []
    assert protocol.verdict is None
    assert not protocol.has_value_grade


def test_explicit_nulls_accepted(protocol_payload):
    protocol = Protocol.model_validate(
        protocol_payload(verdict=None, lastScanned=None, retailSummary=None, website=None, topRisks=None)
    )

    assert protocol.verdict is None
    assert protocol.last_scanned is None
    assert protocol.top_risks is None


def test_null_value_grade_still_counts_as_sent(protocol_payload):
    protocol = Protocol.model_validate(protocol_payload(valueGrade=None, valueRawScore=40))

    assert protocol.has_value_grade
    assert protocol.value_grade is None


def test_comparison_display_name_falls_back_to_slug(protocol_payload):
    result = ComparisonResult.model_validate(
        {"protocols": {"aave-v3": protocol_payload()}, "comparison": {"safest": "aave-v3", "riskiest": "gone"}}
    )

    assert result.display_name("aave-v3") == "Aave V3"
    assert result.display_name("gone") == "gone"
    assert result.not_found == []


def test_envelope_meta_total_and_extras(protocol_payload):
    response = ApiResponse[list[Protocol]].model_validate(
        {"data": [protocol_payload()], "meta": {"tier": "pro", "total": 88, "page": 2}}
    )

    assert response.meta.total == 88
    assert response.meta.rate_limit is None
    assert response.meta.model_extra == {"page": 2}
    assert response.data[0].name == "Aave V3"


def test_comparison_accepts_null_labels_and_not_found(protocol_payload):
    result = ComparisonResult.model_validate(
        {
            "protocols": {"aave-v3": protocol_payload()},
            "comparison": {"safest": "aave-v3", "riskiest": None, "bestValue": None},
            "notFound": None,
        }
    )

    assert result.comparison.best_value is None
    assert result.not_found is None
    assert result.display_name(result.comparison.riskiest) == "?"
