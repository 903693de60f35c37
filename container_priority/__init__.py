"""Container task re-prioritization engine for the robotic container-transport system."""

__version__ = "1.0.0"
