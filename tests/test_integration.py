# tests/test_integration.py
"""End-to-end test of the core workflow."""
import json
from datetime import date

from study_tracker import store
from study_tracker.db import STUDY_DATA_KEY, init_db, write_slot
from study_tracker.navigation import SUBJECTS, TOPICS, ViewController
from study_tracker.stats import chapter_progress, subject_progress


def test_track_a_topic_from_empty_store(tmp_db):
    init_db(tmp_db)
    write_slot(tmp_db, STUDY_DATA_KEY, json.dumps({"subjects": []}))
    nav = ViewController(tmp_db)
    assert nav.items() == []

    subject = store.add_subject(tmp_db, "Mathematics", "#3B82F6")
    chapter = store.add_chapter(tmp_db, subject.id, "Calculus")
    topic = store.add_topic(tmp_db, subject.id, chapter.id, "Derivatives", priority="High", difficulty=4)
    store.mark_topic_complete(tmp_db, subject.id, chapter.id, topic.id)

    nav.refresh()
    assert nav.view == SUBJECTS
    assert len(nav.items()) == 1
    assert subject_progress(nav.items()[0]) == 100.0

    nav.select_subject(subject.id)
    assert chapter_progress(nav.items()[0]) == 100.0
    nav.select_chapter(chapter.id)
    assert nav.view == TOPICS
    shown = nav.items()[0]
    assert shown.name == "Derivatives"
    assert shown.priority == "High"
    assert shown.difficulty == 4
    assert shown.completed is True
    assert shown.completed_date == date.today().isoformat()
    assert len({subject.id, chapter.id, topic.id}) == 3
