import pytest
from unittest.mock import patch

from study_tracker import store
from study_tracker.app import (
    FormCancelled, auth_screen, cmd_add, cmd_complete, cmd_open, cmd_revise, cmd_stats, dispatch,
    form_int_prompt, form_prompt, render_view,
)
from study_tracker.errors import ValidationError
from study_tracker.identity import LocalIdentityProvider
from study_tracker.navigation import CHAPTERS, TOPICS, ViewController
from study_tracker.tree import find_topic


def test_form_prompt_raises_on_q():
    with patch("study_tracker.app.Prompt.ask", return_value="q"):
        with pytest.raises(FormCancelled):
            form_prompt("Subject name")


def test_form_prompt_raises_on_menu():
    with patch("study_tracker.app.Prompt.ask", return_value="menu"):
        with pytest.raises(FormCancelled):
            form_prompt("Subject name")


def test_form_prompt_returns_normal_input():
    with patch("study_tracker.app.Prompt.ask", return_value="Chemistry"):
        assert form_prompt("Subject name") == "Chemistry"


def test_form_int_prompt_converts():
    with patch("study_tracker.app.Prompt.ask", return_value="3"):
        assert form_int_prompt("Difficulty", choices=["1", "2", "3"]) == 3


def test_form_int_prompt_rejects_text():
    with patch("study_tracker.app.Prompt.ask", return_value="three"):
        with pytest.raises(ValidationError):
            form_int_prompt("Sessions")


def test_open_subject_then_chapter(ready_db):
    nav = ViewController(ready_db)
    with patch("study_tracker.app.Prompt.ask", side_effect=["2", "1"]):
        cmd_open(nav)
        assert nav.view == CHAPTERS
        assert nav.subject_id == "2"
        cmd_open(nav)
    assert nav.view == TOPICS
    assert nav.chapter_id == "2-1"


def test_add_subject_from_form(ready_db):
    nav = ViewController(ready_db)
    with patch("study_tracker.app.Prompt.ask", side_effect=["Chemistry", "#F59E0B"]):
        cmd_add(ready_db, nav)
    assert nav.data.subjects[-1].name == "Chemistry"
    assert nav.data.subjects[-1].color == "#F59E0B"


def test_add_cancelled_writes_nothing(ready_db):
    nav = ViewController(ready_db)
    with patch("study_tracker.app.Prompt.ask", return_value="q"):
        with pytest.raises(FormCancelled):
            cmd_add(ready_db, nav)
    assert len(store.get_data(ready_db).subjects) == 2


def test_add_topic_from_form(ready_db):
    nav = ViewController(ready_db)
    nav.select_subject("1")
    nav.select_chapter("1-2")
    answers = ["Eigenvalues", "Characteristic polynomial", "High", "4", "Practical"]
    with patch("study_tracker.app.Prompt.ask", side_effect=answers):
        cmd_add(ready_db, nav)
    topic = nav.items()[-1]
    assert topic.name == "Eigenvalues"
    assert topic.priority == "High"
    assert topic.difficulty == 4
    assert topic.study_mode == "Practical"


def test_complete_and_revise_from_topics_view(ready_db):
    nav = ViewController(ready_db)
    nav.select_subject("1")
    nav.select_chapter("1-1")
    with patch("study_tracker.app.Prompt.ask", side_effect=["2", "2"]):
        cmd_complete(ready_db, nav)
        cmd_revise(ready_db, nav)
    topic = find_topic(store.get_data(ready_db), "1", "1-1", "1-1-2")
    assert topic.completed
    assert [r.count for r in topic.revisions] == [1]


def test_dispatch_quit_and_unknown(ready_db):
    nav = ViewController(ready_db)
    identity = LocalIdentityProvider(ready_db)
    assert dispatch("quit", ready_db, nav, identity) is False
    assert dispatch("dance", ready_db, nav, identity) is True


def test_dispatch_logout(ready_db):
    identity = LocalIdentityProvider(ready_db)
    identity.sign_up("a@b.c", "pw", "A")
    nav = ViewController(ready_db)
    nav.select_subject("1")
    dispatch("logout", ready_db, nav, identity)
    assert identity.current_user is None
    assert nav.subject_id is None


def test_auth_screen_sign_up(ready_db):
    identity = LocalIdentityProvider(ready_db)
    identity.load()
    answers = ["signup", "Ada", "ada@example.com", "pw", "pw"]
    with patch("study_tracker.app.Prompt.ask", side_effect=answers):
        assert auth_screen(identity) is True
    assert identity.current_user.name == "Ada"


def test_auth_screen_mismatched_passwords(ready_db):
    identity = LocalIdentityProvider(ready_db)
    identity.load()
    answers = ["signup", "Ada", "ada@example.com", "pw", "other"]
    with patch("study_tracker.app.Prompt.ask", side_effect=answers):
        assert auth_screen(identity) is True
    assert identity.current_user is None


def test_auth_screen_quit(ready_db):
    identity = LocalIdentityProvider(ready_db)
    with patch("study_tracker.app.Prompt.ask", return_value="quit"):
        assert auth_screen(identity) is False


def test_views_render_rich_progress_bars(ready_db, capsys):
    nav = ViewController(ready_db)
    render_view(nav)
    nav.select_subject("1")
    render_view(nav)
    cmd_stats(nav)
    out = capsys.readouterr().out
    assert "━" in out
    assert "░" not in out
    assert "ProgressBar" not in out
