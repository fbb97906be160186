"""Market headlines curation core."""
