# core/utils.py

def sanitize(data: dict) -> dict:
    """
    Sanitize a payload before it is written to the store:
    - Empty strings → None
    - Strip string whitespace
    - Everything else kept as-is (phone numbers and wards stay strings)
    """
    clean = {}

    for k, v in data.items():
        if isinstance(v, str):
            stripped = v.strip()
            clean[k] = stripped or None
            continue

        clean[k] = v

    return clean
