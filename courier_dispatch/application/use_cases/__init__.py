"""Use cases exposed by the dispatch core."""
