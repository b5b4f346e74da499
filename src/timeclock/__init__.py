"""Time clock package.

Organized by feature modules (employees, time records, corrections,
maintenance, ...) with a thin Flask controller layer on top of
service/repository layers.
"""
