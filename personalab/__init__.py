"""PersonaLab: authoring and export of UX persona documents."""

__version__ = "1.0.0"
