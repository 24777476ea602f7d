"""Transport adapters exposing the dispatch core."""
