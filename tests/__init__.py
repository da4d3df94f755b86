"""Tests for dotsync."""
