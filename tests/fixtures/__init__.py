"""Shared pytest fixtures for gitboot tests."""
