"""Community board backend application."""
