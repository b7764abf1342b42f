"""Gradebook API: courses, assignments, submissions and AI-assisted grading."""
