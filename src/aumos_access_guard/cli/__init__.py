"""Command line interface for aumos-access-guard."""
