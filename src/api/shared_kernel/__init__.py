"""Shared Kernel module.

This module contains foundational components that are explicitly shared across
bounded contexts: identifier normalization, the comparison-filter and
pagination engine, observation context and the base argument error. Changes
to this module affect every context and should be carefully coordinated.
"""
