"""Core settings shared by transport and sessions."""
