"""Utility helpers for listnav."""
