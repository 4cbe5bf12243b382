"""Flashcard review scheduling."""
