"""Reglas de validación compartidas por las entidades de dominio."""


def require_non_empty(value: str, label: str) -> str:
    if not value.strip():
        raise ValueError(f"{label} cannot be empty")
    return value


def require_email(value: str) -> str:
    if "@" not in value:
        raise ValueError("Invalid email format")
    return value
