"""Librarian module for serving static platform knowledge to pipeline stages.

The Librarian answers two kinds of questions:
1. Lookups (industry knowledge, templates per intent or industry) used by scoring
2. Rendered reference text injected into reasoning-service prompts
"""

import re
from typing import List, Optional, Tuple

from config import AGENT_KNOWLEDGE_MAPPING
from .knowledge_base import DEFAULT_KNOWLEDGE, IndustryKnowledge, KnowledgeBase, generic_industry


class Librarian:
    """Read-only access to the knowledge base.

    Unknown industries, intents and patterns never raise: they resolve to a
    generic entry or an empty tuple.
    """

    def __init__(self, knowledge: Optional[KnowledgeBase] = None):
        """Initialize the Librarian.

        Args:
            knowledge: Knowledge tables to serve. Defaults to the built-in tables.
        """
        self.knowledge = knowledge or DEFAULT_KNOWLEDGE

    def industry(self, industry: str) -> IndustryKnowledge:
        """Knowledge entry for an industry, or a generic entry when unknown."""
        return self.knowledge.industries.get(industry, generic_industry(industry))

    def is_known_industry(self, industry: Optional[str]) -> bool:
        return bool(industry) and industry in self.knowledge.industries

    def templates_for_intent(self, intent: str) -> Tuple[str, ...]:
        return self.knowledge.intent_templates.get(intent, ())

    def templates_for_industry(self, industry: str) -> Tuple[str, ...]:
        return self.knowledge.industry_templates.get(industry, ())

    def industry_patterns(self, industry: Optional[str]) -> Tuple[str, ...]:
        patterns = self.knowledge.industry_patterns
        return patterns.get(industry or "", patterns.get("default", ()))

    def known_templates(self) -> List[str]:
        """Every template name in the inventory, in inventory order."""
        names: List[str] = []
        for templates in self.knowledge.template_inventory.values():
            names.extend(templates.keys())
        return names

    def services_mentioned(self, text: str) -> List[str]:
        """Platform services named in free text, in knowledge-base order."""
        text_lower = text.lower()
        return [
            service
            for service, phrases in self.knowledge.service_mentions.items()
            if any(re.search(r"\b" + re.escape(phrase), text_lower) for phrase in phrases)
        ]

    def get_context_for_agent(self, agent_role: str) -> str:
        """Returns the combined reference text for a pipeline stage.

        Args:
            agent_role: Stage name (classifier, strategy, generator, refiner)

        Returns:
            Rendered reference sections separated by blank lines.

        Raises:
            ValueError: If the role is not recognized.
        """
        role = agent_role.lower()
        if role not in AGENT_KNOWLEDGE_MAPPING:
            raise ValueError(
                f"Unknown agent role: {agent_role}. "
                f"Valid roles: {list(AGENT_KNOWLEDGE_MAPPING.keys())}"
            )
        return "\n\n".join(self.render_section(name) for name in AGENT_KNOWLEDGE_MAPPING[role])

    def render_section(self, name: str) -> str:
        """Render one named knowledge section as markdown."""
        kb = self.knowledge
        if name == "industry_examples":
            lines = [f"- {key}: {text}" for key, text in kb.industry_examples.items()]
            return "## Industry Examples\n" + "\n".join(lines)
        if name == "compliance_frameworks":
            lines = [f"- {key}: {text}" for key, text in kb.compliance_frameworks.items()]
            return "## Compliance Frameworks\n" + "\n".join(lines)
        if name == "service_capabilities":
            blocks = []
            for service, (title, *capabilities) in kb.service_capabilities.items():
                body = "\n".join(f"- {cap}" for cap in capabilities)
                blocks.append(f"### {title} ({service})\n{body}")
            return "## Platform Service Capabilities\n" + "\n\n".join(blocks)
        if name == "template_inventory":
            blocks = []
            for category, templates in kb.template_inventory.items():
                body = "\n".join(f"- {key}: {text}" for key, text in templates.items())
                blocks.append(f"### {category}\n{body}")
            return "## Available Templates\n" + "\n\n".join(blocks)
        raise ValueError(f"Unknown knowledge section: {name}")

    def render_industry_patterns(self, industry: Optional[str]) -> str:
        title = industry if industry in self.knowledge.industry_patterns else "general enterprise"
        lines = "\n".join(f"- {p}" for p in self.industry_patterns(industry))
        return f"## Industry Patterns ({title})\n{lines}"


# Convenience function for simple usage
def get_librarian() -> Librarian:
    """Get a singleton Librarian instance."""
    if not hasattr(get_librarian, "_instance"):
        get_librarian._instance = Librarian()
    return get_librarian._instance
