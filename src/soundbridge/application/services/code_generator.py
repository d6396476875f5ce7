"""Session code generation."""

import secrets

# 32 bytes -> 64 hex chars. Hex keeps the code URL-safe without any quoting.
SESSION_CODE_BYTES = 32


# Yo future me, this is the ONLY source of session codes. secrets uses the OS CSPRNG -
# never swap it for random/uuid1, codes are bearer credentials for a few minutes!
def generate_session_code() -> str:
    """Generate an unguessable, URL-safe session code.

    Returns:
        Hex string of SESSION_CODE_BYTES random bytes
    """
    return secrets.token_hex(SESSION_CODE_BYTES)
