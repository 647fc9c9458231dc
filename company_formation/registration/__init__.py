"""Registration persistence and submission handling."""
