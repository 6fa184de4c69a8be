"""Persistence store for the study tree.

The whole tree lives in one storage slot as a JSON document. Every mutator
reads the tree, applies a pure mutation from ``study_tracker.tree`` and writes
the full tree back.
"""
import json
import logging
from datetime import date

from study_tracker import tree
from study_tracker.db import STUDY_DATA_KEY, delete_slot, read_slot, write_slot
from study_tracker.ids import new_id
from study_tracker.models import DEFAULT_COLOR, Chapter, StudyData, Subject, Topic
from study_tracker.seed import seed_data

logger = logging.getLogger(__name__)


def get_data(db_path: str) -> StudyData:
    """Return the stored tree, seeding it on first access.

    A slot that cannot be parsed is replaced by the seed tree.
    """
    raw = read_slot(db_path, STUDY_DATA_KEY)
    if raw is None:
        data = seed_data()
        save_data(db_path, data)
        return data
    try:
        return StudyData.from_dict(json.loads(raw))
    except (ValueError, KeyError, TypeError, AttributeError):
        logger.warning("Stored study data under %r is corrupted; falling back to seed data", STUDY_DATA_KEY)
        data = seed_data()
        save_data(db_path, data)
        return data


def save_data(db_path: str, data: StudyData) -> None:
    write_slot(db_path, STUDY_DATA_KEY, json.dumps(data.to_dict()))


def reset_data(db_path: str) -> StudyData:
    """Drop the stored tree so the next read re-seeds it."""
    delete_slot(db_path, STUDY_DATA_KEY)
    return get_data(db_path)


def add_subject(db_path: str, name: str, color: str = DEFAULT_COLOR) -> Subject:
    subject = Subject(id=new_id(), name=tree.require_name(name, "subject"), color=color)
    save_data(db_path, tree.with_subject(get_data(db_path), subject))
    logger.info("Added subject %s (%s)", subject.name, subject.id)
    return subject


def add_chapter(db_path: str, subject_id: str, name: str) -> Chapter:
    chapter = Chapter(id=new_id(), name=tree.require_name(name, "chapter"))
    save_data(db_path, tree.with_chapter(get_data(db_path), subject_id, chapter))
    logger.info("Added chapter %s (%s) to subject %s", chapter.name, chapter.id, subject_id)
    return chapter


def add_topic(db_path: str, subject_id: str, chapter_id: str, name: str, **fields) -> Topic:
    """Append a topic. Extra keyword arguments set Topic fields."""
    fields = tree.validate_topic_fields(fields)
    fields.setdefault("study_date", date.today().isoformat())
    topic = Topic(id=new_id(), name=tree.require_name(name, "topic"), **fields)
    if not topic.completed:
        topic.completed_date = None
    elif topic.completed_date is None:
        topic.completed_date = date.today().isoformat()
    save_data(db_path, tree.with_topic(get_data(db_path), subject_id, chapter_id, topic))
    logger.info("Added topic %s (%s) to chapter %s", topic.name, topic.id, chapter_id)
    return topic


def update_topic(db_path: str, subject_id: str, chapter_id: str, topic_id: str, **updates) -> Topic:
    data = tree.with_topic_update(get_data(db_path), subject_id, chapter_id, topic_id, updates)
    save_data(db_path, data)
    logger.info("Updated topic %s: %s", topic_id, ", ".join(sorted(updates)))
    return tree.find_topic(data, subject_id, chapter_id, topic_id)


def add_revision(db_path: str, subject_id: str, chapter_id: str, topic_id: str) -> Topic:
    data = tree.with_revision(get_data(db_path), subject_id, chapter_id, topic_id)
    save_data(db_path, data)
    topic = tree.find_topic(data, subject_id, chapter_id, topic_id)
    logger.info("Logged revision %d for topic %s", topic.revisions[-1].count, topic_id)
    return topic


def mark_topic_complete(db_path: str, subject_id: str, chapter_id: str, topic_id: str) -> Topic:
    data = tree.with_topic_complete(get_data(db_path), subject_id, chapter_id, topic_id)
    save_data(db_path, data)
    logger.info("Marked topic %s complete", topic_id)
    return tree.find_topic(data, subject_id, chapter_id, topic_id)
