"""Command-line tools built on the Strava REST client."""
