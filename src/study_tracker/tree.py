"""Pure mutators over the study tree.

Each function takes a StudyData and returns a new one; the input is never
modified. Ids that do not resolve raise NotFoundError.
"""
import copy
import re
from dataclasses import fields
from datetime import date

from study_tracker.errors import NotFoundError, ValidationError
from study_tracker.models import (
    PRIORITIES, STUDY_MODES, Chapter, Revision, StudyData, Subject, Topic,
)

# revisions only grow through with_revision
TOPIC_FIELDS = {f.name for f in fields(Topic)} - {"id", "revisions"}
INT_FIELDS = {"difficulty": "Difficulty", "time_spent": "Time spent"}
COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _today() -> str:
    return date.today().isoformat()


def require_name(name: str, kind: str) -> str:
    if name is None or not name.strip():
        raise ValidationError(f"{kind.capitalize()} name is required")
    return name.strip()


def _as_int(value, label: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number") from None


def validate_topic_fields(values: dict) -> dict:
    """Check topic field values and return them with whole numbers as ints."""
    unknown = set(values) - TOPIC_FIELDS
    if unknown:
        raise ValidationError(f"Unknown topic fields: {', '.join(sorted(unknown))}")
    clean = dict(values)
    if "name" in clean:
        clean["name"] = require_name(clean["name"], "topic")
    if "priority" in clean and clean["priority"] not in PRIORITIES:
        raise ValidationError(f"Priority must be one of {', '.join(PRIORITIES)}")
    if "study_mode" in clean and clean["study_mode"] not in STUDY_MODES:
        raise ValidationError(f"Study mode must be one of {', '.join(STUDY_MODES)}")
    for key, label in INT_FIELDS.items():
        if key in clean:
            clean[key] = _as_int(clean[key], label)
    if "difficulty" in clean and not 1 <= clean["difficulty"] <= 5:
        raise ValidationError("Difficulty must be between 1 and 5")
    if "time_spent" in clean and clean["time_spent"] < 0:
        raise ValidationError("Time spent cannot be negative")
    return clean



def find_subject(data: StudyData, subject_id: str) -> Subject:
    for subject in data.subjects:
        if subject.id == subject_id:
            return subject
    raise NotFoundError("subject", subject_id)


def find_chapter(data: StudyData, subject_id: str, chapter_id: str) -> Chapter:
    for chapter in find_subject(data, subject_id).chapters:
        if chapter.id == chapter_id:
            return chapter
    raise NotFoundError("chapter", chapter_id)


def find_topic(data: StudyData, subject_id: str, chapter_id: str, topic_id: str) -> Topic:
    for topic in find_chapter(data, subject_id, chapter_id).topics:
        if topic.id == topic_id:
            return topic
    raise NotFoundError("topic", topic_id)


def with_subject(data: StudyData, subject: Subject) -> StudyData:
    require_name(subject.name, "subject")
    if not COLOR_RE.match(subject.color or ""):
        raise ValidationError(f"Color must be a hex value like #3B82F6, got {subject.color!r}")
    tree = copy.deepcopy(data)
    tree.subjects.append(copy.deepcopy(subject))
    return tree


def with_chapter(data: StudyData, subject_id: str, chapter: Chapter) -> StudyData:
    require_name(chapter.name, "chapter")
    tree = copy.deepcopy(data)
    find_subject(tree, subject_id).chapters.append(copy.deepcopy(chapter))
    return tree


def with_topic(data: StudyData, subject_id: str, chapter_id: str, topic: Topic) -> StudyData:
    require_name(topic.name, "topic")
    clean = validate_topic_fields({
        "priority": topic.priority,
        "study_mode": topic.study_mode,
        "difficulty": topic.difficulty,
        "time_spent": topic.time_spent,
    })
    topic = copy.deepcopy(topic)
    topic.difficulty, topic.time_spent = clean["difficulty"], clean["time_spent"]
    tree = copy.deepcopy(data)
    find_chapter(tree, subject_id, chapter_id).topics.append(topic)
    return tree


def with_topic_update(
    data: StudyData, subject_id: str, chapter_id: str, topic_id: str, updates: dict
) -> StudyData:
    """Shallow field overwrite on one topic."""
    updates = validate_topic_fields(updates)
    tree = copy.deepcopy(data)
    topic = find_topic(tree, subject_id, chapter_id, topic_id)
    for key, value in updates.items():
        setattr(topic, key, copy.deepcopy(value))
    # keep completed and completed_date in step
    if "completed" in updates or "completed_date" in updates:
        if not topic.completed:
            topic.completed_date = None
        elif topic.completed_date is None:
            topic.completed_date = _today()
    return tree


def with_revision(
    data: StudyData, subject_id: str, chapter_id: str, topic_id: str, today: str | None = None
) -> StudyData:
    tree = copy.deepcopy(data)
    topic = find_topic(tree, subject_id, chapter_id, topic_id)
    topic.revisions.append(Revision(date=today or _today(), count=len(topic.revisions) + 1))
    return tree


def with_topic_complete(
    data: StudyData, subject_id: str, chapter_id: str, topic_id: str, today: str | None = None
) -> StudyData:
    """Mark a topic complete. Repeated calls overwrite completed_date."""
    tree = copy.deepcopy(data)
    topic = find_topic(tree, subject_id, chapter_id, topic_id)
    topic.completed = True
    topic.completed_date = today or _today()
    return tree
