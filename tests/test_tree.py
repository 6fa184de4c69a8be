"""Tests for the pure tree mutators."""
import pytest

from study_tracker.errors import NotFoundError, ValidationError
from study_tracker.models import Chapter, StudyData, Subject, Topic
from study_tracker.seed import seed_data
from study_tracker.tree import (
    find_topic, with_chapter, with_revision, with_subject, with_topic,
    with_topic_complete, with_topic_update,
)


def _tree():
    return StudyData(subjects=[
        Subject(id="s", name="Maths", chapters=[
            Chapter(id="c", name="Calculus", topics=[Topic(id="t", name="Limits")]),
        ]),
    ])


def test_with_subject_does_not_modify_input():
    data = _tree()
    result = with_subject(data, Subject(id="s2", name="Physics"))
    assert len(data.subjects) == 1
    assert [s.id for s in result.subjects] == ["s", "s2"]


def test_with_subject_rejects_blank_name():
    with pytest.raises(ValidationError):
        with_subject(_tree(), Subject(id="x", name="   "))


def test_with_subject_rejects_bad_color():
    with pytest.raises(ValidationError):
        with_subject(_tree(), Subject(id="x", name="Art", color="blue"))


def test_with_chapter_unknown_subject():
    with pytest.raises(NotFoundError) as exc:
        with_chapter(_tree(), "missing", Chapter(id="c2", name="Algebra"))
    assert exc.value.kind == "subject"
    assert exc.value.id == "missing"


def test_with_topic_unknown_chapter():
    with pytest.raises(NotFoundError) as exc:
        with_topic(_tree(), "s", "missing", Topic(id="t2", name="Series"))
    assert exc.value.kind == "chapter"


def test_with_topic_rejects_bad_priority():
    with pytest.raises(ValidationError):
        with_topic(_tree(), "s", "c", Topic(id="t2", name="Series", priority="Urgent"))


def test_with_topic_rejects_difficulty_out_of_range():
    with pytest.raises(ValidationError):
        with_topic(_tree(), "s", "c", Topic(id="t2", name="Series", difficulty=6))


def test_with_topic_update_merges_fields():
    result = with_topic_update(_tree(), "s", "c", "t", {"notes": "epsilon-delta", "time_spent": 45})
    topic = find_topic(result, "s", "c", "t")
    assert topic.notes == "epsilon-delta"
    assert topic.time_spent == 45
    assert topic.name == "Limits"


def test_with_topic_update_rejects_unknown_field():
    with pytest.raises(ValidationError):
        with_topic_update(_tree(), "s", "c", "t", {"colour": "red"})


def test_with_topic_update_cannot_change_id():
    with pytest.raises(ValidationError):
        with_topic_update(_tree(), "s", "c", "t", {"id": "other"})


def test_uncompleting_clears_completed_date():
    done = with_topic_complete(_tree(), "s", "c", "t", today="2025-01-01")
    undone = with_topic_update(done, "s", "c", "t", {"completed": False})
    topic = find_topic(undone, "s", "c", "t")
    assert topic.completed is False
    assert topic.completed_date is None


def test_completing_through_update_sets_date():
    result = with_topic_update(_tree(), "s", "c", "t", {"completed": True})
    assert find_topic(result, "s", "c", "t").completed_date is not None


def test_with_revision_counts_from_one():
    data = _tree()
    for _ in range(4):
        data = with_revision(data, "s", "c", "t", today="2025-02-03")
    revisions = find_topic(data, "s", "c", "t").revisions
    assert [r.count for r in revisions] == [1, 2, 3, 4]
    assert all(r.date == "2025-02-03" for r in revisions)


def test_with_revision_continues_existing_log():
    data = seed_data()
    result = with_revision(data, "1", "1-1", "1-1-1")
    assert [r.count for r in find_topic(result, "1", "1-1", "1-1-1").revisions] == [1, 2, 3]


def test_with_revision_unknown_topic():
    with pytest.raises(NotFoundError) as exc:
        with_revision(_tree(), "s", "c", "nope")
    assert exc.value.kind == "topic"


def test_repeated_completion_overwrites_date():
    data = with_topic_complete(_tree(), "s", "c", "t", today="2025-01-01")
    data = with_topic_complete(data, "s", "c", "t", today="2025-01-05")
    topic = find_topic(data, "s", "c", "t")
    assert topic.completed is True
    assert topic.completed_date == "2025-01-05"


def test_with_topic_update_rejects_revisions():
    data = with_revision(_tree(), "s", "c", "t", today="2025-03-01")
    with pytest.raises(ValidationError):
        with_topic_update(data, "s", "c", "t", {"revisions": []})
    assert len(find_topic(data, "s", "c", "t").revisions) == 1


def test_with_topic_update_converts_numbers():
    result = with_topic_update(_tree(), "s", "c", "t", {"difficulty": "5", "time_spent": "40"})
    topic = find_topic(result, "s", "c", "t")
    assert topic.difficulty == 5
    assert topic.time_spent == 40


def test_with_topic_update_rejects_non_numeric_time():
    with pytest.raises(ValidationError):
        with_topic_update(_tree(), "s", "c", "t", {"time_spent": "an hour"})


def test_with_topic_converts_numbers():
    result = with_topic(_tree(), "s", "c", Topic(id="t2", name="Series", difficulty="3", time_spent="10"))
    topic = find_topic(result, "s", "c", "t2")
    assert (topic.difficulty, topic.time_spent) == (3, 10)
