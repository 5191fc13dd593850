"""Configuration, frame logs, timing, threading helpers and maths for dense RGB-D mapping."""

__version__ = "0.1.0"