"""Achievement definitions and unlocking."""

from __future__ import annotations

from dataclasses import dataclass

from quizwhiz.core.models import User, UserStats


@dataclass(frozen=True, slots=True)
class Achievement:
    """Unlocked once ``stats.<stat>`` reaches ``threshold``."""

    id: str
    title: str
    description: str
    icon: str
    stat: str
    threshold: int

    def is_met(self, stats: UserStats) -> bool:
        return getattr(stats, self.stat) >= self.threshold


ACHIEVEMENTS: tuple[Achievement, ...] = (
    # Creation
    Achievement("create_1", "First Step", "Create 1 Quiz", "📝", "quizzes_created", 1),
    Achievement("create_5", "Creator", "Create 5 Quizzes", "✏️", "quizzes_created", 5),
    Achievement("create_10", "Architect", "Create 10 Quizzes", "📐", "quizzes_created", 10),
    Achievement("create_25", "Master Builder", "Create 25 Quizzes", "🏗️", "quizzes_created", 25),
    Achievement("create_50", "Legendary Author", "Create 50 Quizzes", "🏰", "quizzes_created", 50),
    # Playing
    Achievement("play_1", "Player One", "Play 1 Quiz", "🎮", "quizzes_played", 1),
    Achievement("play_10", "Regular", "Play 10 Quizzes", "🕹️", "quizzes_played", 10),
    Achievement("play_50", "Addict", "Play 50 Quizzes", "🎲", "quizzes_played", 50),
    Achievement("play_100", "Centurion", "Play 100 Quizzes", "💯", "quizzes_played", 100),
    # Performance
    Achievement("perf_1", "Brainiac", "Get 1 Perfect Score", "🧠", "perfect_scores", 1),
    Achievement("perf_5", "Honor Student", "Get 5 Perfect Scores", "🎖️", "perfect_scores", 5),
    Achievement("perf_10", "Perfectionist", "Get 10 Perfect Scores", "⭐", "perfect_scores", 10),
    Achievement("perf_25", "Unstoppable", "Get 25 Perfect Scores", "🚀", "perfect_scores", 25),
    # Questions answered
    Achievement("ans_10", "Novice", "Answer 10 Questions", "👶", "questions_answered", 10),
    Achievement("ans_50", "Learner", "Answer 50 Questions", "📖", "questions_answered", 50),
    Achievement("ans_100", "Scholar", "Answer 100 Questions", "🎓", "questions_answered", 100),
    Achievement("ans_500", "Encyclopedia", "Answer 500 Questions", "📚", "questions_answered", 500),
    Achievement("ans_1000", "Oracle", "Answer 1000 Questions", "🔮", "questions_answered", 1000),
    # Study
    Achievement("study_1", "Student", "Use Study Mode 1 time", "👓", "study_sessions", 1),
    Achievement("study_10", "Crammer", "Use Study Mode 10 times", "📒", "study_sessions", 10),
    Achievement("study_50", "Professor", "Use Study Mode 50 times", "👨‍🏫", "study_sessions", 50),
    # AI
    Achievement("ai_quiz", "Tech Savvy", "Generate an AI Quiz", "🤖", "ai_quizzes_generated", 1),
    Achievement("ai_img", "Artist", "Generate an AI Image", "🎨", "ai_images_generated", 1),
)

_BY_ID = {achievement.id: achievement for achievement in ACHIEVEMENTS}


def get_achievement(achievement_id: str) -> Achievement | None:
    return _BY_ID.get(achievement_id)


def unlock_achievements(user: User) -> list[Achievement]:
    """Add every newly earned achievement to ``user`` and return them in definition order."""
    unlocked = [
        achievement
        for achievement in ACHIEVEMENTS
        if achievement.id not in user.achievements and achievement.is_met(user.stats)
    ]
    user.achievements.extend(achievement.id for achievement in unlocked)
    return unlocked
