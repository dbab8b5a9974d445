"""
Minimal ABI handling for contract calls, transactions and deployments.

Accepts both JSON ABI entries and human-readable fragments such as
``"function balanceOf(address owner) view returns (uint256)"`` and normalizes
them into JSON-ABI dicts. Encoding and decoding are delegated to ``eth_abi``.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence

from eth_abi import decode, encode
from eth_utils import (
    function_signature_to_4byte_selector,
    is_checksum_address,
    is_hex,
    to_bytes,
    to_checksum_address,
)

Fragment = Dict[str, Any]

_MODIFIERS = {"view", "pure", "payable", "nonpayable", "external", "public", "constant"}
_LOCATION_KEYWORDS = {"indexed", "memory", "calldata", "storage"}
_ARRAY_SUFFIX = re.compile(r"\[\d*\]$")
_ADDRESS_HEX = re.compile(r"^0x[0-9a-fA-F]{40}$")


class AbiError(ValueError):
    """Raised when an ABI fragment or argument list cannot be used."""


def _match_paren(text: str, start: int) -> int:
    depth = 0
    for idx in range(start, len(text)):
        char = text[idx]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return idx
    raise AbiError(f"Unbalanced parentheses in ABI fragment: {text}")


def _split_params(text: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current = ""
    for char in text:
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        current += char
    if current.strip():
        parts.append(current.strip())
    return parts


def _normalize_type(raw: str) -> str:
    match = re.match(r"^(u?int)(\[.*)?$", raw)
    if match:
        return f"{match.group(1)}256{match.group(2) or ''}"
    return raw


def _parse_param(text: str) -> Dict[str, Any]:
    if text.startswith("("):
        end = _match_paren(text, 0)
        components = [_parse_param(p) for p in _split_params(text[1:end])]
        remainder = text[end + 1 :].split()
        suffix = ""
        if remainder and remainder[0].startswith("["):
            suffix = remainder.pop(0)
        remainder = [t for t in remainder if t not in _LOCATION_KEYWORDS]
        return {"name": remainder[-1] if remainder else "", "type": f"tuple{suffix}", "components": components}
    if text.startswith("tuple("):
        return _parse_param(text[len("tuple") :])
    tokens = [t for t in text.split() if t not in _LOCATION_KEYWORDS]
    if not tokens:
        raise AbiError(f"Empty ABI parameter in: {text}")
    return {"name": tokens[1] if len(tokens) > 1 else "", "type": _normalize_type(tokens[0])}


def parse_fragment(text: str) -> Optional[Fragment]:
    """
    Parse a human-readable function or constructor fragment.

    Events, errors and other fragment kinds return None.
    """
    stripped = text.strip().rstrip(";")
    if stripped.startswith("constructor"):
        kind, rest = "constructor", stripped[len("constructor") :].strip()
        name = ""
    elif stripped.startswith("function "):
        kind, rest = "function", stripped[len("function ") :].strip()
        paren = rest.find("(")
        if paren <= 0:
            raise AbiError(f"Invalid function fragment: {text}")
        name, rest = rest[:paren].strip(), rest[paren:]
    elif stripped.split(" ", 1)[0] in {"event", "error", "fallback", "receive"}:
        return None
    else:
        raise AbiError(f"Unsupported ABI fragment: {text}")

    if not rest.startswith("("):
        raise AbiError(f"Invalid ABI fragment: {text}")
    end = _match_paren(rest, 0)
    inputs = [_parse_param(p) for p in _split_params(rest[1:end])]
    tail = rest[end + 1 :].strip()

    outputs: List[Dict[str, Any]] = []
    returns_at = tail.find("returns")
    modifiers_text = tail if returns_at < 0 else tail[:returns_at]
    if returns_at >= 0:
        ret = tail[returns_at + len("returns") :].strip()
        if not ret.startswith("("):
            raise AbiError(f"Invalid returns clause: {text}")
        ret_end = _match_paren(ret, 0)
        outputs = [_parse_param(p) for p in _split_params(ret[1:ret_end])]

    mutability = "nonpayable"
    for token in modifiers_text.split():
        if token in ("view", "constant"):
            mutability = "view"
        elif token in ("pure", "payable"):
            mutability = token
        elif token not in _MODIFIERS:
            raise AbiError(f"Unknown modifier '{token}' in: {text}")

    fragment: Fragment = {"type": kind, "inputs": inputs, "stateMutability": mutability}
    if kind == "function":
        fragment["name"] = name
        fragment["outputs"] = outputs
    return fragment


def normalize_abi(abi: Any) -> List[Fragment]:
    """Normalize a mixed list of JSON entries and strings into function/constructor fragments."""
    if isinstance(abi, str):
        try:
            abi = json.loads(abi)
        except ValueError as exc:
            raise AbiError("ABI must be a JSON array or a list of fragments.") from exc
    if not isinstance(abi, list):
        raise AbiError("ABI must be a list.")
    fragments: List[Fragment] = []
    for entry in abi:
        if isinstance(entry, str):
            parsed = parse_fragment(entry)
            if parsed is not None:
                fragments.append(parsed)
        elif isinstance(entry, dict):
            kind = entry.get("type", "function")
            if kind not in ("function", "constructor"):
                continue
            fragments.append(
                {
                    "type": kind,
                    "name": entry.get("name", ""),
                    "inputs": list(entry.get("inputs") or []),
                    "outputs": list(entry.get("outputs") or []),
                    "stateMutability": entry.get("stateMutability")
                    or ("view" if entry.get("constant") else "nonpayable"),
                }
            )
        else:
            raise AbiError("ABI entries must be strings or objects.")
    return fragments


def canonical_type(param: Dict[str, Any]) -> str:
    raw = param.get("type", "")
    if raw.startswith("tuple"):
        inner = ",".join(canonical_type(c) for c in param.get("components") or [])
        return f"({inner}){raw[len('tuple'):]}"
    return _normalize_type(raw)


def function_signature(fragment: Fragment) -> str:
    types = ",".join(canonical_type(p) for p in fragment.get("inputs", []))
    return f"{fragment['name']}({types})"


def function_selector(fragment: Fragment) -> bytes:
    return function_signature_to_4byte_selector(function_signature(fragment))


def find_function(abi: Iterable[Fragment], name: str, arg_count: int) -> Fragment:
    candidates = [f for f in abi if f.get("type") == "function" and f.get("name") == name]
    if not candidates:
        raise AbiError(f"Function {name} not found in ABI")
    for fragment in candidates:
        if len(fragment.get("inputs", [])) == arg_count:
            return fragment
    expected = len(candidates[0].get("inputs", []))
    raise AbiError(f"Function {name} expects {expected} argument(s), got {arg_count}")


def default_fragment(name: str, arg_count: int, *, read_only: bool) -> Fragment:
    """Fallback fragment used when no ABI is supplied: every argument is a uint256."""
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": f"param{i}", "type": "uint256"} for i in range(arg_count)],
        "outputs": [{"name": "", "type": "uint256"}] if read_only else [],
        "stateMutability": "view" if read_only else "nonpayable",
    }


def is_read_only(fragment: Fragment) -> bool:
    return fragment.get("stateMutability") in ("view", "pure")


def is_valid_address(value: Any) -> bool:
    """0x-prefixed 20-byte hex; mixed-case input must carry a valid EIP-55 checksum."""
    if not isinstance(value, str) or not _ADDRESS_HEX.fullmatch(value):
        return False
    digits = value[2:]
    if digits == digits.lower() or digits == digits.upper():
        return True
    return is_checksum_address(value)


def _coerce(param: Dict[str, Any], value: Any) -> Any:
    type_str = param.get("type", "")
    if _ARRAY_SUFFIX.search(type_str):
        if not isinstance(value, (list, tuple)):
            raise AbiError(f"Expected array for {type_str}")
        element = dict(param, type=type_str[: type_str.rfind("[")])
        return [_coerce(element, item) for item in value]
    if type_str == "tuple":
        components = param.get("components") or []
        if isinstance(value, dict):
            value = [value.get(c.get("name")) for c in components]
        if not isinstance(value, (list, tuple)) or len(value) != len(components):
            raise AbiError("Tuple argument does not match ABI components")
        return tuple(_coerce(c, v) for c, v in zip(components, value))
    if type_str.startswith(("uint", "int")):
        if isinstance(value, bool):
            raise AbiError(f"Expected integer for {type_str}")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text, 16) if text.lower().startswith("0x") else int(text)
            except ValueError as exc:
                raise AbiError(f"Expected integer for {type_str}, got {value!r}") from exc
        raise AbiError(f"Expected integer for {type_str}")
    if type_str == "address":
        if not isinstance(value, str) or not is_valid_address(value.strip()):
            raise AbiError(f"Invalid address argument: {value!r}")
        return to_checksum_address(value.strip())
    if type_str == "bool":
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise AbiError(f"Expected boolean, got {value!r}")
    if type_str.startswith("bytes"):
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        if isinstance(value, str) and is_hex(value):
            return to_bytes(hexstr=value)
        raise AbiError(f"Expected hex string for {type_str}")
    if type_str == "string":
        return str(value)
    return value


def _encode_args(params: Sequence[Dict[str, Any]], args: Sequence[Any]) -> bytes:
    if len(params) != len(args):
        raise AbiError(f"Expected {len(params)} argument(s), got {len(args)}")
    types = [canonical_type(p) for p in params]
    values = [_coerce(p, a) for p, a in zip(params, args)]
    try:
        return encode(types, values)
    except Exception as exc:
        raise AbiError(f"Could not encode arguments: {exc}") from exc


def encode_call(fragment: Fragment, args: Sequence[Any]) -> str:
    """Return hex calldata (selector + encoded arguments)."""
    data = function_selector(fragment) + _encode_args(fragment.get("inputs", []), args)
    return "0x" + data.hex()


def encode_constructor(abi: Iterable[Fragment], bytecode: str, args: Sequence[Any]) -> str:
    constructor = next((f for f in abi if f.get("type") == "constructor"), None)
    code = bytecode if bytecode.startswith("0x") else f"0x{bytecode}"
    if constructor is None:
        if args:
            raise AbiError("ABI has no constructor but arguments were supplied")
        return code
    return code + _encode_args(constructor.get("inputs", []), args).hex()


def to_jsonable(value: Any) -> Any:
    """Convert decoded ABI values into JSON-safe primitives."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def _checksum_addresses(param: Dict[str, Any], value: Any) -> Any:
    type_str = param.get("type", "")
    if _ARRAY_SUFFIX.search(type_str) and isinstance(value, (list, tuple)):
        element = dict(param, type=type_str[: type_str.rfind("[")])
        return [_checksum_addresses(element, item) for item in value]
    if type_str == "tuple" and isinstance(value, (list, tuple)):
        return tuple(_checksum_addresses(c, v) for c, v in zip(param.get("components") or [], value))
    if type_str == "address" and isinstance(value, str):
        return to_checksum_address(value)
    return value


def decode_raw(fragment: Fragment, data: str) -> List[Any]:
    """Decode return data into native Python values."""
    outputs = fragment.get("outputs") or []
    if not outputs:
        return []
    raw = to_bytes(hexstr=data) if data and data != "0x" else b""
    if not raw:
        raise AbiError("Empty response from contract call (is this a contract address?)")
    try:
        values = decode([canonical_type(p) for p in outputs], raw)
    except Exception as exc:
        raise AbiError(f"Could not decode contract response: {exc}") from exc
    return [_checksum_addresses(p, v) for p, v in zip(outputs, values)]


def decode_result(fragment: Fragment, data: str) -> Any:
    """Decode return data into JSON-safe values; a single output is unwrapped."""
    values = [to_jsonable(v) for v in decode_raw(fragment, data)]
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values
