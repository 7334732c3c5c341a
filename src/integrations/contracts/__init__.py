"""
Contracts (data models).

Request/response shapes for the Efí integration:
- Pix charge request body
- Unified charge result (txid + QR code)

Both mock and real HTTP clients should use these contracts.
"""
