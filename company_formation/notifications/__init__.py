"""Registration summary formatting and email dispatch."""
