"""Logging and tracing setup for the command line tool."""
