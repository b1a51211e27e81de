"""Loading of variable bindings for the command line interface.

A bindings file holds either a single mapping from variable names to numbers or a list of such mappings; the
expression is evaluated once per mapping. YAML (including multi-document streams), JSON, JSON5, and CSV (one mapping
per row, with the header row naming the variables) are supported.

"""

import csv
import os
from decimal import Decimal
from numbers import Real
from typing import Any, Dict, List, Optional

import json5
from yaml import load_all
try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader

from .numeric import parse_number

Bindings = Dict[str, Real]

FORMATS_BY_EXTENSION: Dict[str, str] = {
    '.yml': 'yaml',
    '.yaml': 'yaml',
    '.json': 'json',
    '.json5': 'json',
    '.csv': 'csv'
}


def get_format(path: str, explicit_format: Optional[str] = None) -> str:
    if explicit_format is not None:
        return explicit_format
    _, ext = os.path.splitext(path)
    try:
        return FORMATS_BY_EXTENSION[ext.lower()]
    except KeyError:
        raise ValueError(f"Cannot determine the format of {path!r}; expected one of "
                         f"{', '.join(sorted(FORMATS_BY_EXTENSION))}") from None


def to_bindings(obj: Any) -> Bindings:
    """Validates a single decoded mapping."""
    if not isinstance(obj, dict):
        raise ValueError(f"Expected a mapping of variable names to numbers but got {obj!r}")
    ret: Bindings = {}
    for name, value in obj.items():
        if isinstance(value, str):
            value = parse_number(value)
        elif isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
            raise ValueError(f"The value of {name!r} must be a number, not {value!r}")
        ret[str(name)] = value
    return ret


def to_bindings_list(obj: Any) -> List[Bindings]:
    if obj is None:
        return []
    elif isinstance(obj, list):
        return [to_bindings(item) for item in obj]
    return [to_bindings(obj)]


def load_yaml(path: str) -> List[Bindings]:
    with open(path, 'rb') as stream:
        documents = list(load_all(stream, Loader=Loader))
    ret: List[Bindings] = []
    for document in documents:
        ret.extend(to_bindings_list(document))
    return ret


def load_json(path: str) -> List[Bindings]:
    with open(path, 'r', encoding='utf-8') as f:
        return to_bindings_list(json5.load(f))


def load_csv(path: str) -> List[Bindings]:
    with open(path, 'r', newline='', encoding='utf-8') as f:
        return [
            {name.strip(): parse_number(value) for name, value in row.items() if value is not None and value.strip()}
            for row in csv.DictReader(f)
        ]


LOADERS = {
    'yaml': load_yaml,
    'json': load_json,
    'csv': load_csv
}


def load_bindings(path: str, explicit_format: Optional[str] = None) -> List[Bindings]:
    """Loads every set of bindings in :obj:`path`.

    Raises:
        ValueError: If the format cannot be determined or the file does not contain mappings from names to numbers.
        OSError: If the file cannot be read.

    """
    return LOADERS[get_format(path, explicit_format)](path)
