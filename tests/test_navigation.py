import pytest

from study_tracker import store
from study_tracker.errors import NotFoundError
from study_tracker.identity import Authenticated, Loading, Unauthenticated, User
from study_tracker.navigation import (
    CHAPTERS, SUBJECTS, TOPICS, ViewController, top_level_view,
)


def test_starts_at_subjects(ready_db):
    nav = ViewController(ready_db)
    assert nav.view == SUBJECTS
    assert nav.breadcrumb() == ["Study Tracker"]
    assert [s.name for s in nav.items()] == ["Mathematics", "Physics"]


def test_drill_down(ready_db):
    nav = ViewController(ready_db)
    nav.select_subject("1")
    assert nav.view == CHAPTERS
    assert [c.name for c in nav.items()] == ["Calculus", "Linear Algebra"]
    nav.select_chapter("1-1")
    assert nav.view == TOPICS
    assert nav.breadcrumb() == ["Study Tracker", "Mathematics", "Calculus"]
    assert [t.name for t in nav.items()] == ["Derivatives", "Integration"]


def test_selecting_subject_clears_chapter(ready_db):
    nav = ViewController(ready_db)
    nav.select_subject("1")
    nav.select_chapter("1-2")
    nav.select_subject("1")
    assert nav.view == CHAPTERS
    assert nav.chapter_id is None


def test_go_up_and_home(ready_db):
    nav = ViewController(ready_db)
    nav.select_subject("1")
    nav.select_chapter("1-1")
    nav.go_up()
    assert nav.view == CHAPTERS
    assert nav.subject_id == "1"
    nav.go_up()
    assert nav.view == SUBJECTS
    assert nav.subject_id is None
    nav.select_subject("2")
    nav.select_chapter("2-1")
    nav.go_home()
    assert (nav.view, nav.subject_id, nav.chapter_id) == (SUBJECTS, None, None)


def test_unknown_selection(ready_db):
    nav = ViewController(ready_db)
    with pytest.raises(NotFoundError):
        nav.select_subject("99")
    assert nav.view == SUBJECTS


def test_refresh_picks_up_mutations(ready_db):
    nav = ViewController(ready_db)
    nav.select_subject("1")
    nav.select_chapter("1-1")
    store.mark_topic_complete(ready_db, "1", "1-1", "1-1-2")
    assert not nav.items()[1].completed
    nav.refresh()
    assert nav.items()[1].completed


def test_top_level_view():
    assert top_level_view(Loading()) == "loading"
    assert top_level_view(Unauthenticated()) == "auth"
    assert top_level_view(Authenticated(User(1, "a@b.c", "A"))) == "tracker"
