"""Membership bounded context.

Manages groups and users joined by a many-to-many membership relation that
is denormalized on both sides and kept in sync without multi-document
transactions.
"""
