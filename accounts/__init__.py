"""User account service: registration, login, session tokens and password reset by email."""
