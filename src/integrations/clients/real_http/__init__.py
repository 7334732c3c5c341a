"""
Real HTTP integration clients.

These clients communicate with Efí Pay over HTTPS with mutual TLS.

Important:
- Must expose the same coroutines as the mock clients
- Error responses surface as EfiApiError carrying the decoded payload
"""
