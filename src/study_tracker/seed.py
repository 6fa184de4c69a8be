"""Sample study tree written on first access."""
from study_tracker.db import STUDY_DATA_KEY, read_slot
from study_tracker.models import StudyData

SEED_DATA = {
    "subjects": [
        {
            "id": "1",
            "name": "Mathematics",
            "color": "#3B82F6",
            "chapters": [
                {
                    "id": "1-1",
                    "name": "Calculus",
                    "topics": [
                        {
                            "id": "1-1-1",
                            "name": "Derivatives",
                            "studyDate": "2025-09-18",
                            "completed": True,
                            "completedDate": "2025-09-20",
                            "revisions": [
                                {"date": "2025-09-22", "count": 1},
                                {"date": "2025-09-25", "count": 2},
                            ],
                            "notes": "Important rules: Product rule, Chain rule, Quotient rule. "
                                     "Applications in optimization problems.",
                            "timeSpent": 120,
                            "difficulty": 4,
                            "priority": "High",
                            "studyMode": "Theory",
                        },
                        {
                            "id": "1-1-2",
                            "name": "Integration",
                            "studyDate": "2025-09-19",
                            "completed": False,
                            "revisions": [],
                            "notes": "Basic integration techniques and applications.",
                            "timeSpent": 90,
                            "difficulty": 3,
                            "priority": "Medium",
                            "studyMode": "Theory",
                        },
                    ],
                },
                {
                    "id": "1-2",
                    "name": "Linear Algebra",
                    "topics": [
                        {
                            "id": "1-2-1",
                            "name": "Matrices",
                            "studyDate": "2025-09-17",
                            "completed": True,
                            "completedDate": "2025-09-19",
                            "revisions": [{"date": "2025-09-21", "count": 1}],
                            "notes": "Matrix operations, determinants, and inverse matrices.",
                            "timeSpent": 150,
                            "difficulty": 3,
                            "priority": "High",
                            "studyMode": "Theory",
                        },
                    ],
                },
            ],
        },
        {
            "id": "2",
            "name": "Physics",
            "color": "#10B981",
            "chapters": [
                {
                    "id": "2-1",
                    "name": "Mechanics",
                    "topics": [
                        {
                            "id": "2-1-1",
                            "name": "Newton's Laws",
                            "studyDate": "2025-09-16",
                            "completed": True,
                            "completedDate": "2025-09-18",
                            "revisions": [],
                            "notes": "Three laws of motion and their applications in problem solving.",
                            "timeSpent": 100,
                            "difficulty": 2,
                            "priority": "Medium",
                            "studyMode": "Theory",
                        },
                    ],
                },
            ],
        },
    ]
}


def seed_data() -> StudyData:
    """Return a fresh copy of the sample tree."""
    return StudyData.from_dict(SEED_DATA)


def is_seeded(db_path: str) -> bool:
    """Check whether a study tree has ever been stored."""
    return read_slot(db_path, STUDY_DATA_KEY) is not None
