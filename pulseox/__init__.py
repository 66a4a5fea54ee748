"""Pulse oximeter tools: SpO2 and heart-rate estimation, sensor and WiFi-link state machines, and a measurement receiver with patient history."""

__version__ = "0.1.0"