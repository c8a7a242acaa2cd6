"""Notification dispatch engine for the poultry marketplace.

Delivers order, comment, digest and announcement events to users as in-app
records, emails and SMS messages.
"""
