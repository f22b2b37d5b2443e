# chronos/core/catalog.py
# Default observation catalog: (id, display name)

SUBJECTS = [
    "Language Arts",
    "English",
    "Mathematics",
    "Physics",
    "Chemistry",
    "Biology",
    "Geography",
    "History",
    "Civics",
]

TEACHING_MODES = [
    ("lecture", "Lecture"),
    ("group-discussion", "Group discussion"),
    ("practice", "Practice / worked examples"),
    ("digital-tool", "Digital tools"),
]

TEACHING_ACTIONS = [
    ("praise", "Positive praise"),
    ("correction", "Behaviour correction"),
    ("open-question", "Open question"),
    ("closed-question", "Closed question"),
    ("patrol", "Circulating the room"),
]
