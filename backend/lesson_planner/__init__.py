"""Lesson plan constructor backend."""
