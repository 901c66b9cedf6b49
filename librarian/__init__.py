"""Librarian module for static knowledge management."""

from .knowledge_base import DEFAULT_KNOWLEDGE, IndustryKnowledge, KnowledgeBase
from .librarian import Librarian, get_librarian

__all__ = ["DEFAULT_KNOWLEDGE", "IndustryKnowledge", "KnowledgeBase", "Librarian", "get_librarian"]
