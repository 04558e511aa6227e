"""Tests for gyst."""
