"""Random names and secret values for sample resources."""
import secrets


def random_resource_name(prefix: str, max_len: int) -> str:
    """`prefix` followed by lowercase hex, exactly `max_len` characters long."""
    if len(prefix) >= max_len:
        raise ValueError(f"Prefix {prefix!r} leaves no room within {max_len} characters")
    return (prefix + secrets.token_hex(max_len))[:max_len]


def random_secret_value(nbytes: int = 24) -> str:
    return secrets.token_urlsafe(nbytes)
