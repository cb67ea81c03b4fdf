import secrets


# 256 bits from the OS CSPRNG; never derived from ticket or owner ids
QR_TOKEN_BYTES = 32


def generate_qr_token() -> str:
    return secrets.token_urlsafe(QR_TOKEN_BYTES)
