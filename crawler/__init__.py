"""Page fetching and record extraction for manga providers."""
