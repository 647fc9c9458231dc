"""Companies House registry search and name availability."""
