"""
Domain enums for WhatCanICook.
Contains all enumeration types used across the domain models.
"""

import enum


class Theme(str, enum.Enum):
    """UI colour theme stored with the user's preferences"""

    LIGHT = "light"
    DARK = "dark"


class ChatRole(str, enum.Enum):
    """Message roles understood by the chat completions endpoint"""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
