"""Notus - personal notebook and timetable manager."""
