import re

MAX_ADDRESS_LEN = 254
MAX_LOCAL_LEN = 64
MAX_LABEL_LEN = 63

# Local part: restricted punctuation, no leading/double dots. Domain: dot-separated
# labels ending in an alphabetic top-level label.
EMAIL_RE = re.compile(
    r"[-!#$%&'*+/0-9=?A-Z^_a-z{|}~]"
    r"(\.?[-!#$%&'*+/0-9=?A-Z^_a-z`{|}~])*"
    r"@[a-zA-Z0-9](-*\.?[a-zA-Z0-9])*"
    r"\.[a-zA-Z](-?[a-zA-Z0-9])+"
)


def is_valid_email(address: str) -> bool:
    """Syntax and length check for a recipient address."""
    if not isinstance(address, str):
        return False
    if len(address) > MAX_ADDRESS_LEN or not EMAIL_RE.fullmatch(address):
        return False
    local, domain = address.split("@", 1)
    if len(local) > MAX_LOCAL_LEN:
        return False
    return not any(len(label) > MAX_LABEL_LEN for label in domain.split("."))
