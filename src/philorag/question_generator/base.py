"""QuestionGenerator abstract base class."""

from abc import ABC, abstractmethod


class QuestionGenerator(ABC):
    """Abstract base class for hypothetical question generation."""

    @abstractmethod
    def generate(self, passage: str) -> list[str]:
        """Generate questions that the passage answers.

        Implementations must not raise on model failure; they return a
        fallback question instead so indexing can continue.
        """
        ...
