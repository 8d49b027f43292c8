import secrets

BARCODE_LENGTH = 12


def generate_barcode(length: int = BARCODE_LENGTH) -> str:
    """
    Draw a numeric barcode uniformly from 10**length values

    The result is zero padded, so every barcode has exactly ``length`` digits.
    Uniqueness is not checked here; the caller retries against the store.
    """
    return str(secrets.randbelow(10 ** length)).zfill(length)
