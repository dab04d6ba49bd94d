"""Tests for :mod:`travel_accounts`."""
