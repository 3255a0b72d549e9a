"""Marketplace business rules, configuration and logging."""
