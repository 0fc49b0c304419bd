"""CLI module for chatwarden."""
