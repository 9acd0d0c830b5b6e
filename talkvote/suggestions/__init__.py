"""Interactive flow for proposing new topics."""

from talkvote.suggestions.flow import SuggestionFlow, show_existing_topics


__all__ = ["SuggestionFlow", "show_existing_topics"]
