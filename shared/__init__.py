"""Shared building blocks for the fleet dashboard: settings, logging, contracts, clients."""
