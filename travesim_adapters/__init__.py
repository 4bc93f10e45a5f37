"""State data, converters, UDP transport, wire messages and endpoint configurers for a robot soccer simulator."""

__version__ = "0.1.0"