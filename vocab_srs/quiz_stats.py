"""
Quiz statistics: completed quizzes and their running score total.

One record per learner. Scores are percentages (0-100) of correct
answers in a finished quiz.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class QuizStats:
    completed_count: int = 0
    total_score: float = 0.0

    @property
    def average_score(self) -> float:
        """Mean score per completed quiz; the raw total when none completed."""
        return self.total_score / max(self.completed_count, 1)

    def record(self, score: float) -> QuizStats:
        """
        Return stats including one more finished quiz.

        Raises:
            ValueError: score outside 0-100
        """
        if not 0 <= score <= 100:
            raise ValueError(f"Quiz score must be between 0 and 100, got {score!r}")
        return replace(
            self,
            completed_count=self.completed_count + 1,
            total_score=self.total_score + score,
        )
