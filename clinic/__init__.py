"""Django project package for the dental clinic backend."""
