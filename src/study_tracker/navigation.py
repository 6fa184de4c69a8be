"""Subjects -> Chapters -> Topics view controller."""
from study_tracker import store
from study_tracker.identity import Authenticated, AuthState, Loading
from study_tracker.models import Chapter, StudyData, Subject
from study_tracker.tree import find_chapter, find_subject

SUBJECTS = "subjects"
CHAPTERS = "chapters"
TOPICS = "topics"

HOME_LABEL = "Study Tracker"


def top_level_view(state: AuthState) -> str:
    """Which screen the identity gate allows: loading, auth or tracker."""
    if isinstance(state, Loading):
        return "loading"
    if isinstance(state, Authenticated):
        return "tracker"
    return "auth"


class ViewController:
    """Tracks the displayed level and the selected subject and chapter.

    Only ids are kept between calls; the tree is re-read from the store on
    every ``refresh`` so the store stays the single source of truth.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.view = SUBJECTS
        self.subject_id = None
        self.chapter_id = None
        self.data = StudyData()
        self.refresh()

    def refresh(self) -> StudyData:
        self.data = store.get_data(self.db_path)
        return self.data

    @property
    def current_subject(self) -> Subject | None:
        if self.subject_id is None:
            return None
        return find_subject(self.data, self.subject_id)

    @property
    def current_chapter(self) -> Chapter | None:
        if self.chapter_id is None:
            return None
        return find_chapter(self.data, self.subject_id, self.chapter_id)

    def select_subject(self, subject_id: str) -> Subject:
        subject = find_subject(self.data, subject_id)
        self.subject_id = subject.id
        self.chapter_id = None
        self.view = CHAPTERS
        return subject

    def select_chapter(self, chapter_id: str) -> Chapter:
        if self.subject_id is None:
            raise RuntimeError("select a subject before a chapter")
        chapter = find_chapter(self.data, self.subject_id, chapter_id)
        self.chapter_id = chapter.id
        self.view = TOPICS
        return chapter

    def go_home(self) -> None:
        self.subject_id = None
        self.chapter_id = None
        self.view = SUBJECTS

    def go_up(self) -> None:
        if self.view == TOPICS:
            self.select_subject(self.subject_id)
        else:
            self.go_home()

    def breadcrumb(self) -> list[str]:
        trail = [HOME_LABEL]
        if self.subject_id is not None:
            trail.append(self.current_subject.name)
        if self.chapter_id is not None:
            trail.append(self.current_chapter.name)
        return trail

    def items(self) -> list:
        """Records shown at the current level."""
        if self.view == SUBJECTS:
            return list(self.data.subjects)
        if self.view == CHAPTERS:
            return list(self.current_subject.chapters)
        return list(self.current_chapter.topics)
