"""SensorConsole: agent-to-UI core for the environmental-monitoring console."""

__version__ = "0.1.0"
