"""Small request helpers shared by the JSON views."""
import json

from .errors import ValidationError


def json_body(request) -> dict:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (TypeError, ValueError):
        raise ValidationError("Malformed JSON body")
    if not isinstance(data, dict):
        raise ValidationError("JSON body must be an object")
    return data


def _safe_int(v):
    try:
        if v is None or v == "":
            return None
        return int(v)
    except (TypeError, ValueError):
        return None


def int_param(raw, *, name: str, default: int, minimum: int = 1, maximum: int | None = None) -> int:
    """Parse a positive integer query parameter, rejecting garbage with a 400."""
    if raw is None or raw == "":
        return default
    value = _safe_int(raw)
    if value is None or value < minimum or (maximum is not None and value > maximum):
        bounds = f">= {minimum}" if maximum is None else f"between {minimum} and {maximum}"
        raise ValidationError(f"'{name}' must be an integer {bounds}")
    return value


def id_field(data: dict, name: str, *, required: bool = True):
    """Read an integer id from a JSON body. Returns None when optional and absent."""
    raw = data.get(name)
    if raw is None or raw == "":
        if required:
            raise ValidationError(f"'{name}' is required", detail={name: ["This field is required."]})
        return None
    value = _safe_int(raw)
    if value is None or isinstance(raw, bool):
        raise ValidationError(f"'{name}' must be an integer", detail={name: ["Enter a whole number."]})
    return value


def form_errors(form) -> dict:
    return {field: [str(e) for e in errs] for field, errs in form.errors.items()}
