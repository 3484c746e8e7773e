# roster/utils/formatters.py
import re

_WORD_START = re.compile(r"(?:^|\s)\S")
_CPF_GROUPS = re.compile(r"(\d{3})(\d{3})(\d{3})(\d{2})")


def only_digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def format_name(value: str) -> str:
    """Title-case a free-text name: "joão da silva" -> "João Da Silva"."""
    return _WORD_START.sub(lambda m: m.group(0).upper(), (value or "").lower())


def format_cpf(value: str) -> str:
    """Group CPF digits as 000.000.000-00. Any other length is returned as bare digits."""
    digits = only_digits(value)
    if len(digits) != 11:
        return digits
    return _CPF_GROUPS.sub(r"\1.\2.\3-\4", digits)
