"""Settings, logging and request dependencies shared by the application."""
