"""DTO validation package for the HTTP boundary."""

from .chat import ChatStreamRequestDTO, ContentPartDTO, SettingsDTO, TurnDTO, ValidateModelRequestDTO

__all__ = ["ContentPartDTO", "TurnDTO", "SettingsDTO", "ChatStreamRequestDTO", "ValidateModelRequestDTO"]
