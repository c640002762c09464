KEY_SEPARATOR = "$"


def encode_key(table: str, key: str, field: str) -> str:
    """
    Flatten (table, key, field) into one key of the store namespace.

    Injective as long as KEY_SEPARATOR does not occur in table, key or field.
    """
    return f"{table}{KEY_SEPARATOR}{key}{KEY_SEPARATOR}{field}"
