"""Attendance Portal package.

Feature modules (students, attendance, summaries, streaks, batch) with
Protocol repositories, MySQL implementations, plain services and a thin Flask
controller layer.
"""
