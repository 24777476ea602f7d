"""Application services orchestrating the dispatch core."""
