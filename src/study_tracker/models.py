"""Data classes for the study tree."""
from dataclasses import dataclass, field
from typing import Optional

PRIORITIES = ("Low", "Medium", "High")
STUDY_MODES = ("Theory", "Practical", "Assignment", "Lab Work", "Revision")
DEFAULT_COLOR = "#3B82F6"


@dataclass
class Revision:
    date: str
    count: int

    def to_dict(self) -> dict:
        return {"date": self.date, "count": self.count}

    @classmethod
    def from_dict(cls, data: dict) -> "Revision":
        return cls(date=data["date"], count=int(data["count"]))


@dataclass
class Topic:
    id: str
    name: str
    completed: bool = False
    revisions: list[Revision] = field(default_factory=list)
    notes: str = ""
    time_spent: int = 0  # minutes
    difficulty: int = 3
    priority: str = "Medium"
    study_mode: str = "Theory"
    study_date: Optional[str] = None
    completed_date: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "completed": self.completed,
            "revisions": [r.to_dict() for r in self.revisions],
            "notes": self.notes,
            "timeSpent": self.time_spent,
            "difficulty": self.difficulty,
            "priority": self.priority,
            "studyMode": self.study_mode,
        }
        if self.study_date is not None:
            data["studyDate"] = self.study_date
        if self.completed_date is not None:
            data["completedDate"] = self.completed_date
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Topic":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            completed=bool(data.get("completed", False)),
            revisions=[Revision.from_dict(r) for r in data.get("revisions", [])],
            notes=data.get("notes", ""),
            time_spent=int(data.get("timeSpent", 0)),
            difficulty=int(data.get("difficulty", 3)),
            priority=data.get("priority", "Medium"),
            study_mode=data.get("studyMode", "Theory"),
            study_date=data.get("studyDate"),
            completed_date=data.get("completedDate"),
        )


@dataclass
class Chapter:
    id: str
    name: str
    topics: list[Topic] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "topics": [t.to_dict() for t in self.topics]}

    @classmethod
    def from_dict(cls, data: dict) -> "Chapter":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            topics=[Topic.from_dict(t) for t in data.get("topics", [])],
        )


@dataclass
class Subject:
    id: str
    name: str
    color: str = DEFAULT_COLOR
    chapters: list[Chapter] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "chapters": [c.to_dict() for c in self.chapters],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Subject":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            color=data.get("color", DEFAULT_COLOR),
            chapters=[Chapter.from_dict(c) for c in data.get("chapters", [])],
        )


@dataclass
class StudyData:
    subjects: list[Subject] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"subjects": [s.to_dict() for s in self.subjects]}

    @classmethod
    def from_dict(cls, data: dict) -> "StudyData":
        return cls(subjects=[Subject.from_dict(s) for s in data["subjects"]])


@dataclass
class FocusSession:
    subject: str
    start_time: int  # epoch ms
    end_time: int
    duration: int  # ms

    def to_dict(self) -> dict:
        return {
            "subject": self.subject,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FocusSession":
        return cls(
            subject=data["subject"],
            start_time=int(data["startTime"]),
            end_time=int(data.get("endTime") or int(data["startTime"]) + int(data["duration"])),
            duration=int(data["duration"]),
        )
