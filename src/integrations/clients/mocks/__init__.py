"""
Mock integration clients.

These clients return fake (but realistic) responses without calling Efí.
They are used when:
- Efí credentials or certificates are not available locally
- We want to exercise the charge flow end-to-end without external dependencies

Switching to real:
Leave INTEGRATIONS_MODE unset (or anything other than mock/test) and
src/integrations/clients/efi_factory.py builds the real EfiPixClient.
"""
