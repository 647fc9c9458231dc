"""Static SIC code catalog and search."""
