"""Grafana identity sync — projects organizations and users into a governance graph."""

__version__ = "0.1.0"
