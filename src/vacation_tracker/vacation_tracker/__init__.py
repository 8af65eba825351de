"""Vacation Tracker package.

Organized by feature modules (users, auth, vacations) with a thin Flask
controller layer on top of service/repository layers.
"""
