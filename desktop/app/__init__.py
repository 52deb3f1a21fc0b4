"""Tkinter client application."""
