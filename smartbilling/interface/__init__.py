"""Mini README: Interactive interfaces for the billing assistant.

Exports the FastAPI application factory that serves the JSON API consumed
by browser front ends. The Typer CLI lives in ``main_billing_assistant.py``
at the repository root.
"""

from .web_app import create_application

__all__ = ["create_application"]
