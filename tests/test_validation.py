"""Unit tests for row validation and the per-job accumulator."""
from aiusage.domain.fields import UsageRecordData
from aiusage.domain.validation import RecordAccumulator, RecordError, validate_row

VALID = {
    "email": "a@x.com",
    "promptCount": "5",
    "businessUnit": "BU1",
    "account": "AcctA",
    "vertical": "Digital",
}


def test_valid_row_produces_record():
    result = validate_row(VALID, 1)
    assert result == UsageRecordData(
        email="a@x.com", prompt_count=5, business_unit="BU1", account="AcctA", vertical="Digital",
    )


def test_missing_required_field_is_listed():
    row = {k: v for k, v in VALID.items() if k != "account"}
    result = validate_row(row, 3)
    assert isinstance(result, RecordError)
    assert result.row_index == 3
    assert [r.field for r in result.reasons] == ["account"]


def test_all_missing_fields_listed_when_only_unknown_columns_present():
    result = validate_row({"department": "R&D"}, 1)
    assert isinstance(result, RecordError)
    assert {r.field for r in result.reasons} == {
        "email", "promptCount", "businessUnit", "account", "vertical",
    }


def test_non_numeric_prompt_count_yields_exactly_one_reason():
    result = validate_row({**VALID, "promptCount": "notanumber"}, 1)
    assert isinstance(result, RecordError)
    assert len(result.reasons) == 1
    assert result.reasons[0].field == "promptCount"


def test_multiple_bad_fields_are_all_reported():
    result = validate_row({**VALID, "promptCount": "x", "email": ""}, 1)
    assert isinstance(result, RecordError)
    assert {r.field for r in result.reasons} == {"promptCount", "email"}


def test_unknown_columns_are_ignored():
    result = validate_row({**VALID, "department": "R&D", "Notes": ""}, 1)
    assert isinstance(result, UsageRecordData)
    assert not hasattr(result, "department")


def test_header_case_does_not_matter():
    row = {k.upper(): v for k, v in VALID.items()}
    assert isinstance(validate_row(row, 1), UsageRecordData)


def test_accumulator_counts_and_stages():
    acc = RecordAccumulator()
    acc.add(validate_row(VALID, 1))
    acc.add(validate_row({**VALID, "promptCount": "bad"}, 2))
    assert acc.successful_records == 1
    assert acc.failed_records == 1
    assert acc.total_records == 2
    assert len(acc.staged) == 1
    assert acc.error_summary().startswith("row 2: promptCount:")


def test_accumulator_without_failures_has_no_summary():
    acc = RecordAccumulator()
    acc.add(validate_row(VALID, 1))
    assert acc.error_summary() is None


def test_error_summary_is_bounded():
    acc = RecordAccumulator(max_summary_rows=3, max_summary_chars=200)
    for i in range(1, 501):
        acc.add(validate_row({"email": "x" * 50}, i))
    summary = acc.error_summary()
    assert acc.failed_records == 500
    assert len(summary) <= 200
    assert summary.startswith("row 1:")


def test_error_summary_mentions_hidden_rows():
    acc = RecordAccumulator(max_summary_rows=2, max_summary_chars=10_000)
    for i in range(1, 6):
        acc.add(validate_row({**VALID, "promptCount": "?"}, i))
    assert acc.error_summary().endswith("... and 3 more row error(s)")


def test_oversized_prompt_count_is_a_row_error():
    result = validate_row({**VALID, "promptCount": "9" * 5000}, 4)
    assert isinstance(result, RecordError)
    assert [(r.field, r.message) for r in result.reasons] == [("promptCount", "out of range")]
