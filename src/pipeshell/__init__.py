"""Streaming pipeline core and adaptive table renderer for a structured shell."""
