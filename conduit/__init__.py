"""Conduit authentication and engagement statistics core."""
