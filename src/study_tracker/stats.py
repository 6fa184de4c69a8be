"""Progress percentages and aggregate study statistics."""
from datetime import date, timedelta

from study_tracker.models import Chapter, StudyData, Subject


def progress_percent(completed: int, total: int) -> float:
    if total == 0:
        return 0.0
    return (completed / total) * 100


def chapter_progress(chapter: Chapter) -> float:
    completed = sum(1 for t in chapter.topics if t.completed)
    return progress_percent(completed, len(chapter.topics))


def subject_progress(subject: Subject) -> float:
    topics = [t for c in subject.chapters for t in c.topics]
    return progress_percent(sum(1 for t in topics if t.completed), len(topics))


def subject_time_spent(subject: Subject) -> int:
    return sum(t.time_spent for c in subject.chapters for t in c.topics)


def _activity_dates(data: StudyData) -> set[date]:
    dates = set()
    for subject in data.subjects:
        for chapter in subject.chapters:
            for topic in chapter.topics:
                stamps = [topic.study_date, topic.completed_date] + [r.date for r in topic.revisions]
                for stamp in stamps:
                    if stamp:
                        try:
                            dates.add(date.fromisoformat(stamp))
                        except ValueError:
                            continue
    return dates


def current_streak(data: StudyData, today: date | None = None) -> int:
    """Count consecutive days with activity, ending today.

    Returns 0 if nothing happened today.
    """
    today = today or date.today()
    dates = _activity_dates(data)
    streak = 0
    day = today
    while day in dates:
        streak += 1
        day -= timedelta(days=1)
    return streak


def calculate_stats(data: StudyData, today: date | None = None) -> dict:
    topics = [t for s in data.subjects for c in s.chapters for t in c.topics]
    completed = sum(1 for t in topics if t.completed)
    return {
        "total_topics": len(topics),
        "topics_completed": completed,
        "total_study_time": sum(t.time_spent for t in topics),
        "total_revisions": sum(len(t.revisions) for t in topics),
        "overall_progress": round(progress_percent(completed, len(topics)), 1),
        "current_streak": current_streak(data, today),
    }


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"
