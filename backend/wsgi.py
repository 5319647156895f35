"""
WSGI entrypoint for gunicorn: ``gunicorn --chdir backend wsgi:app``
"""
from careercard import create_app

# Gunicorn entrypoint
app = create_app()
