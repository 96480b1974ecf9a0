"""SmartKyzmet package.

Organized by feature modules (employees, attendance, analytics, ...) with a thin
Flask controller layer on top of service/repository layers.
"""
