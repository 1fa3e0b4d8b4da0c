from abc import ABC, abstractmethod  # noqa: D100


class BasePromptBuilder(ABC):
    """Abstract base class for system prompt builders."""

    @abstractmethod
    def create_prompt(self, system_prompt: str) -> str:
        """Creates the full system prompt text to be sent to the model."""
        pass  # noqa: PIE790
