import pytest

from jira_worktime.core.errors import SettingsError
from jira_worktime.core.models import WorkingHoursProfile
from jira_worktime.preprocess.transitions import TransitionWalker, WalkState, apply_durations

TARGET = "time_in_source"


def _status(from_status="Open", to_status="In Progress"):
    return {"field": "status", "fromString": from_status, "toString": to_status}


def _history(created, *items):
    return {"created": created, "items": list(items)}


def _sample_doc(created="2015-10-05T09:00:00.000-0300", histories=None):
    doc = {
        "key": "ORG-1",
        "issue_type": "Bug",
        "project_name": "Organization",
        "fields": {"created": created},
        "changelog": {"histories": histories if histories is not None else []},
    }
    if created is None:
        del doc["fields"]["created"]
    return doc


def _items(doc, index=0):
    return doc["changelog"]["histories"][index]["items"]


def test_same_day_transition_writes_hours():
    doc = _sample_doc(
        "2015-10-06T08:00:00.000-0300",
        [_history("2015-10-06T13:00:00.000-0300", _status())],
    )
    out = apply_durations(doc, WorkingHoursProfile(), TARGET)
    assert out is doc
    assert _items(doc)[0][TARGET] == 5


def test_transition_at_closing_boundary():
    doc = _sample_doc(
        "2014-10-16T10:00:00.000-0300",
        [_history("2014-10-16T18:00:00.000-0300", _status())],
    )
    apply_durations(doc, None, TARGET)
    assert _items(doc)[0][TARGET] == 8


def test_consecutive_transitions_use_previous_instant():
    doc = _sample_doc(
        histories=[
            _history("2015-10-05T15:00:00.000-0300", _status("Open", "In Progress")),
            _history("2015-10-07T10:00:00.000-0300", _status("In Progress", "Done")),
        ]
    )
    apply_durations(doc, WorkingHoursProfile(), TARGET)
    assert _items(doc, 0)[0][TARGET] == 6
    # 3h Monday + 2h Wednesday + 8h Tuesday
    assert _items(doc, 1)[0][TARGET] == 13


def test_remove_non_status_items():
    doc = _sample_doc(
        histories=[
            _history(
                "2015-10-05T10:00:00.000-0300",
                _status(),
                {"field": "priority", "fromString": "Low", "toString": "High"},
            )
        ]
    )
    apply_durations(doc, WorkingHoursProfile(), TARGET, remove_non_status_items=True)
    items = _items(doc)
    assert len(items) == 1
    assert items[0]["field"] == "status"
    assert items[0][TARGET] == 1


def test_non_status_items_kept_by_default():
    doc = _sample_doc(
        histories=[_history("2015-10-05T10:00:00.000-0300", {"field": "priority"}, _status())]
    )
    items_before = _items(doc)
    apply_durations(doc, WorkingHoursProfile(), TARGET)
    assert _items(doc) is items_before
    assert len(items_before) == 2
    assert TARGET not in items_before[0]


def test_context_fields_copied_onto_entries():
    doc = _sample_doc(histories=[_history("2015-10-05T10:00:00.000-0300", {"field": "labels"})])
    apply_durations(doc, WorkingHoursProfile(), TARGET)
    entry = doc["changelog"]["histories"][0]
    assert entry["issue_type"] == "Bug"
    assert entry["project_name"] == "Organization"


def test_nested_target_field():
    doc = _sample_doc(histories=[_history("2015-10-05T11:00:00.000-0300", _status())])
    apply_durations(doc, WorkingHoursProfile(), "metrics.hours")
    assert _items(doc)[0]["metrics"] == {"hours": 2}


def test_walk_is_idempotent():
    doc = _sample_doc(
        histories=[
            _history("2015-10-05T15:00:00.000-0300", _status()),
            _history("2015-10-08T09:30:00.000-0300", _status("In Progress", "Done")),
        ]
    )
    apply_durations(doc, WorkingHoursProfile(), TARGET, remove_non_status_items=True)
    first = [it[TARGET] for h in doc["changelog"]["histories"] for it in h["items"]]
    apply_durations(doc, WorkingHoursProfile(), TARGET, remove_non_status_items=True)
    second = [it[TARGET] for h in doc["changelog"]["histories"] for it in h["items"]]
    assert first == second


def test_none_document_passes_through():
    assert apply_durations(None, WorkingHoursProfile(), TARGET) is None


def test_missing_changelog_is_not_an_error():
    doc = {"fields": {"created": "2015-10-05T09:00:00.000-0300"}}
    result = TransitionWalker(TARGET).walk(doc)
    assert result.document is doc
    assert result.outcomes == []
    assert result.state is WalkState.HAVE_PREVIOUS_INSTANT


def test_missing_created_date_skips_first_transition():
    doc = _sample_doc(
        created=None,
        histories=[
            _history("2015-10-05T10:00:00.000-0300", _status()),
            _history("2015-10-05T12:00:00.000-0300", _status("In Progress", "Done")),
        ],
    )
    walker = TransitionWalker(TARGET)
    result = walker.walk(doc)
    assert TARGET not in _items(doc, 0)[0]
    assert _items(doc, 1)[0][TARGET] == 2
    assert [o.hours for o in result.outcomes] == [None, 2]
    assert result.state is WalkState.HAVE_PREVIOUS_INSTANT


def test_unparsable_created_date_reports_warning():
    warnings = []
    doc = _sample_doc(
        created="yesterday",
        histories=[_history("2015-10-05T10:00:00.000-0300", _status())],
    )
    walker = TransitionWalker(TARGET, reporter=lambda ctx, msg: warnings.append((ctx, msg)))
    result = walker.walk(doc)
    assert TARGET not in _items(doc)[0]
    assert warnings and warnings[0][0] == "fields.created"
    assert result.state is WalkState.HAVE_PREVIOUS_INSTANT


def test_bad_event_date_clears_previous_instant():
    warnings = []
    doc = _sample_doc(
        histories=[
            _history("2015-10-05T10:00:00.000-0300", _status()),
            _history(12345, _status("In Progress", "Review")),
            _history("2015-10-05T15:00:00.000-0300", _status("Review", "Done")),
            _history("2015-10-05T17:00:00.000-0300", _status("Done", "Closed")),
        ]
    )
    walker = TransitionWalker(TARGET, reporter=lambda ctx, msg: warnings.append(ctx))
    result = walker.walk(doc)
    assert _items(doc, 0)[0][TARGET] == 1
    assert TARGET not in _items(doc, 1)[0]
    # Previous instant was discarded by the failed parse, so this one is skipped too
    assert TARGET not in _items(doc, 2)[0]
    assert _items(doc, 3)[0][TARGET] == 2
    assert warnings == ["changelog.histories[1].created"]
    assert result.outcomes[1].error is not None
    assert result.outcomes[2].error is None and result.outcomes[2].hours is None


def test_out_of_order_history_is_captured_per_item():
    warnings = []
    doc = _sample_doc(
        histories=[
            _history("2015-10-05T08:00:00.000-0300", _status()),
            _history("2015-10-05T11:00:00.000-0300", _status("In Progress", "Done")),
        ]
    )
    walker = TransitionWalker(TARGET, reporter=lambda ctx, msg: warnings.append(msg))
    result = walker.walk(doc)
    assert TARGET not in _items(doc, 0)[0]
    assert _items(doc, 1)[0][TARGET] == 3
    assert result.outcomes[0].error is not None
    assert len(warnings) == 1


def test_structural_error_only_affects_one_item():
    doc = _sample_doc(
        histories=[
            _history("2015-10-05T10:00:00.000-0300", {**_status(), "metrics": 3}),
            _history("2015-10-05T12:00:00.000-0300", _status("In Progress", "Done")),
        ]
    )
    result = TransitionWalker("metrics.hours", reporter=lambda ctx, msg: None).walk(doc)
    assert _items(doc, 0)[0]["metrics"] == 3
    assert _items(doc, 1)[0]["metrics"] == {"hours": 2}
    assert [o.ok for o in result.outcomes] == [False, True]
    assert result.written == 1


def test_empty_item_list_left_empty():
    doc = _sample_doc(histories=[_history("2015-10-05T10:00:00.000-0300")])
    apply_durations(doc, WorkingHoursProfile(), TARGET, remove_non_status_items=True)
    assert _items(doc) == []


def test_colon_offset_format_walks_every_transition():
    doc = _sample_doc(
        "2015-10-06T08:00:00-03:00",
        [_history("2015-10-06T13:00:00-03:00", _status())],
    )
    apply_durations(doc, None, TARGET, source_date_format="yyyy-MM-dd'T'HH:mm:ssZZ")
    assert _items(doc)[0][TARGET] == 5


def test_unusable_format_fails_once_before_walking():
    doc = _sample_doc(histories=[_history("2015-10-05T10:00:00.000-0300", _status())])
    with pytest.raises(SettingsError):
        apply_durations(doc, None, TARGET, source_date_format="yyyy-MM-dd Z 'at' Z")
    assert TARGET not in _items(doc)[0]


def test_empty_target_field_is_a_settings_error():
    with pytest.raises(SettingsError):
        TransitionWalker("")
