"""Operator commands for the JTI store."""
