"""Base agent class that the reasoning-backed pipeline stages inherit from.

Every agent:
- Loads reference knowledge for its role from the Librarian
- Builds a system prompt from its instructions plus that knowledge
- Sends work through the provider ladder with a deterministic fallback
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, TypeVar

from config import settings
from librarian import Librarian, get_librarian
from providers import LadderResult, LadderWork, ProviderLadder, build_provider_ladder

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseAgent(ABC):
    """Base class for ladder-backed agents."""

    def __init__(
        self,
        role: str,
        system_prompt: str,
        ladder: Optional[ProviderLadder] = None,
        librarian: Optional[Librarian] = None,
    ):
        """Initialize the agent.

        Args:
            role: Agent role for knowledge loading (e.g. 'strategy', 'generator')
            system_prompt: The agent's instructions
            ladder: Provider ladder; defaults to the configured ladder
            librarian: Static knowledge; defaults to the shared Librarian
        """
        self.role = role
        self.system_prompt = system_prompt
        self.ladder = ladder or build_provider_ladder()
        self.librarian = librarian or get_librarian()
        self.knowledge_context = self._load_knowledge_context()

    def _load_knowledge_context(self) -> str:
        try:
            return self.librarian.get_context_for_agent(self.role)
        except ValueError:
            # Role not in mapping, return empty context
            return ""

    def _build_full_system_prompt(
        self,
        system_prompt: Optional[str] = None,
        extra_sections: Sequence[str] = (),
    ) -> str:
        """System prompt plus reference knowledge and any per-call sections."""
        parts = [system_prompt or self.system_prompt]
        if self.knowledge_context:
            parts.append("\n\n# REFERENCE KNOWLEDGE\n\n")
            parts.append(self.knowledge_context)
        for section in extra_sections:
            parts.append("\n\n")
            parts.append(section)
        return "".join(parts)

    async def _run_ladder(
        self,
        label: str,
        user_message: str,
        parse: Callable[[str], T],
        fallback: Callable[[], T],
        system_prompt: Optional[str] = None,
        extra_sections: Sequence[str] = (),
    ) -> LadderResult[T]:
        work = LadderWork(
            label=f"{self.role}:{label}",
            system_prompt=self._build_full_system_prompt(system_prompt, extra_sections),
            user_message=user_message,
            parse=parse,
            max_tokens=settings.generation_max_tokens,
        )
        return await self.ladder.execute(work, fallback)

    @abstractmethod
    def get_task_description(self) -> str:
        """Return a description of what this agent does.

        Used for logging and debugging.
        """
        pass
