"""Error types for the headlines service."""


class CandidateSourceError(Exception):
    """The candidate source could not supply candidates."""
