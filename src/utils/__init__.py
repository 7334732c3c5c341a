"""
Utility modules for the Efí Pay integration
"""
from .efi_config_loader import (
    CertificateMaterial,
    EfiConfigurationError,
    EfiCredentials,
    EfiEnvironment,
    is_base64,
    load_efi_environment,
    resolve_certificate,
    select_credentials,
)

__all__ = [
    'CertificateMaterial',
    'EfiConfigurationError',
    'EfiCredentials',
    'EfiEnvironment',
    'is_base64',
    'load_efi_environment',
    'resolve_certificate',
    'select_credentials',
]
