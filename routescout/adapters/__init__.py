"""Adapters — sandbox runner, desktop, screen, storage and console."""
