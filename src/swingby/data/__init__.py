"""Preset starting conditions."""
