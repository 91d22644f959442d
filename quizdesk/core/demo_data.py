"""Sample quizzes and one learner's history for demos and smoke tests."""

from __future__ import annotations

from quizdesk.core.models import Question, Quiz, Submission
from quizdesk.core.quiz_manager import QuizManager

DEMO_OWNER_ID = "teacher-1"
DEMO_STUDENT_ID = "student-1"
DEMO_STUDENT_NAME = "Alex Rodriguez"

_DEMO_QUIZZES = [
    {
        "title": "Introduction to React",
        "description": "Test your knowledge of React fundamentals",
        "time_limit_minutes": 15,
        "questions": [
            Question("q1", "What is JSX?", ("JavaScript XML", "Java Syntax Extension", "JSON XML", "JavaScript Extension"), 0, 10),
            Question("q2", "Which hook is used for state management in functional components?", ("useEffect", "useState", "useContext", "useReducer"), 1, 10),
            Question("q3", "What is the virtual DOM?", ("A database technology", "A CSS framework", "A copy of the real DOM kept in memory", "A new web standard"), 2, 15),
            Question("q4", "What does the useEffect hook do?", ("Manages component state", "Handles form submissions", "Creates context providers", "Performs side effects in functional components"), 3, 12),
        ],
        "answers": {"q1": 0, "q2": 1, "q3": 2, "q4": 3},
        "time_spent_seconds": 720,
    },
    {
        "title": "JavaScript Fundamentals",
        "description": "Basic JavaScript concepts and syntax",
        "time_limit_minutes": 20,
        "questions": [
            Question("q5", "What is the difference between let and var?", ("No difference", "let has block scope, var has function scope", "var is newer", "let is faster"), 1, 10),
            Question("q6", "What does === operator do?", ("Assignment", "Comparison without type checking", "Strict equality comparison", "Mathematical operation"), 2, 10),
            Question("q7", "Which of the following is NOT a JavaScript data type?", ("String", "Boolean", "Integer", "Undefined"), 2, 8),
            Question("q8", "What is a closure in JavaScript?", ("A way to close browser windows", "A method to end functions", "A loop termination technique", "A function that has access to variables in its outer scope"), 3, 15),
        ],
        "answers": {"q5": 1, "q6": 2, "q7": 1, "q8": 3},
        "time_spent_seconds": 480,
    },
    {
        "title": "Web Development Basics",
        "description": "HTML, CSS, and general web development concepts",
        "time_limit_minutes": 25,
        "questions": [
            Question("q9", "Which HTML tag is used for the largest heading?", ("<h1>", "<h6>", "<header>", "<title>"), 0, 5),
            Question("q10", "What does CSS stand for?", ("Computer Style Sheets", "Cascading Style Sheets", "Creative Style Sheets", "Colorful Style Sheets"), 1, 5),
            Question("q11", "Which CSS property is used to change the text color?", ("text-color", "font-color", "color", "text-style"), 2, 8),
            Question("q12", "What is the correct way to link an external CSS file?", ('<style src="style.css">', "<css>style.css</css>", "<stylesheet>style.css</stylesheet>", '<link rel="stylesheet" href="style.css">'), 3, 10),
        ],
        "answers": {"q9": 0, "q10": 1, "q11": 2, "q12": 3},
        "time_spent_seconds": 360,
    },
]


def load_demo_content(manager: QuizManager) -> tuple[list[Quiz], list[Submission]]:
    """Create the sample quizzes and record the sample learner's attempts."""
    quizzes: list[Quiz] = []
    submissions: list[Submission] = []
    for entry in _DEMO_QUIZZES:
        quiz = manager.create_quiz(
            title=entry["title"],
            description=entry["description"],
            owner_id=DEMO_OWNER_ID,
            questions=list(entry["questions"]),
            time_limit_minutes=entry["time_limit_minutes"],
        )
        quizzes.append(quiz)
        submissions.append(
            manager.submit_quiz(
                quiz.id,
                DEMO_STUDENT_ID,
                DEMO_STUDENT_NAME,
                entry["answers"],
                entry["time_spent_seconds"],
            )
        )
    return quizzes, submissions
