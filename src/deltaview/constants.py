"""
Shared constants for deltaview.

This module provides a single source of truth for the names that make up
the diff wire format and the configuration surface.
"""

# Diff wire format
SET_GROUP = "set"
"""Group holding dotted path -> literal replacement value."""

UNSET_GROUP = "unset"
"""Group holding dotted path -> True for removed fields."""

PATH_SEPARATOR = "."
"""Separator joining nested keys into a dotted path."""

# Configuration
ENV_PREFIX = "DELTAVIEW_"
"""Prefix for environment variables read by Settings."""

ENV_CONFIG_FILE = "DELTAVIEW_CONFIG_FILE"
"""Environment variable naming an explicit YAML config file."""

DEFAULT_CONFIG_FILENAME = "deltaview.yaml"
"""Config file looked up in the current directory when no path is given."""
