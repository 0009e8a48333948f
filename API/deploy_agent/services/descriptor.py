"""
Compose descriptor discovery and decoding.

Compose files encode several service fields in more than one shape
(`environment` as a mapping or a list, `command` as a string or a list, ...).
Each raw value is decoded once into a tagged variant and then normalized by a
per-field function, so every accepted shape is an explicit branch and anything
else falls through to the field's empty default.
"""
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import aiofiles
import yaml

from deploy_agent.domain.errors import DescriptorParseError, NotFoundError
from deploy_agent.domain.project import NetworkDef, ProjectDescriptor, ServiceDef


# ---------------------------
# Tagged field variants
# ---------------------------
@dataclass(frozen=True)
class ScalarField:
    value: str


@dataclass(frozen=True)
class ListField:
    items: tuple  # only the string items of the raw list


@dataclass(frozen=True)
class MapField:
    entries: Dict[str, Any]  # string keys only, values untouched


FieldValue = Union[ScalarField, ListField, MapField, None]


def decode_field(raw: Any) -> FieldValue:
    if isinstance(raw, str):
        return ScalarField(raw)
    if isinstance(raw, list):
        return ListField(tuple(item for item in raw if isinstance(item, str)))
    if isinstance(raw, dict):
        return MapField({k: v for k, v in raw.items() if isinstance(k, str)})
    return None


# ---------------------------
# Per-field normalizers
# ---------------------------
def as_string(value: FieldValue) -> str:
    if isinstance(value, ScalarField):
        return value.value
    return ""


def as_build_context(value: FieldValue) -> str:
    if isinstance(value, ScalarField):
        return value.value
    if isinstance(value, MapField):
        context = value.entries.get("context")
        return context if isinstance(context, str) else ""
    return ""


def as_string_list(value: FieldValue) -> List[str]:
    if isinstance(value, ListField):
        return list(value.items)
    return []


def as_name_set(value: FieldValue) -> List[str]:
    """Names given as a list or as the keys of a mapping, declared order, no repeats."""
    if isinstance(value, ListField):
        names: Iterable[str] = value.items
    elif isinstance(value, MapField):
        names = value.entries.keys()
    else:
        return []
    return list(dict.fromkeys(names))


def as_environment(value: FieldValue) -> Dict[str, str]:
    if isinstance(value, MapField):
        return {k: v for k, v in value.entries.items() if isinstance(v, str)}
    if isinstance(value, ListField):
        # List entries are kept whole as keys; "A=1" is not split.
        return {item: "" for item in value.items}
    return {}


def as_command(value: FieldValue) -> str:
    if isinstance(value, ScalarField):
        return value.value
    if isinstance(value, ListField):
        return " ".join(value.items)
    return ""


# ---------------------------
# YAML loading
# ---------------------------
class _DescriptorLoader(yaml.SafeLoader):
    """
    SafeLoader resolving plain scalars with YAML 1.2 core rules.
    `restart: no` stays a string, `- 8080:80` is not read as a base-60 int and
    `2024-01-01` is not read as a date.
    """


_BOOL_TAG = "tag:yaml.org,2002:bool"
_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"

_REPLACED_TAGS = {_BOOL_TAG, _INT_TAG, _FLOAT_TAG, _TIMESTAMP_TAG}

_DescriptorLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _REPLACED_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_DescriptorLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)
_DescriptorLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(r"^[-+]?(?:0|[1-9][0-9]*)$"),
    list("-+0123456789"),
)
_DescriptorLoader.add_implicit_resolver(
    _FLOAT_TAG,
    re.compile(
        r"^(?:[-+]?(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?"
        r"|[-+]?[0-9]+[eE][-+]?[0-9]+"
        r"|[-+]?\.(?:inf|Inf|INF)|\.(?:nan|NaN|NAN))$"
    ),
    list("-+0123456789."),
)


def load_document(text: str) -> Dict[str, Any]:
    try:
        document = yaml.load(text, Loader=_DescriptorLoader)
    except yaml.YAMLError as exc:
        raise DescriptorParseError(f"descriptor is not valid YAML: {exc}") from exc
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise DescriptorParseError("descriptor top level must be a mapping")
    return document


def parse_service(name: str, raw: Any) -> ServiceDef:
    service = ServiceDef(name=name)
    if not isinstance(raw, dict):
        return service

    service.image = as_string(decode_field(raw.get("image")))
    service.build = as_build_context(decode_field(raw.get("build")))
    service.ports = as_string_list(decode_field(raw.get("ports")))
    service.environment = as_environment(decode_field(raw.get("environment")))
    service.volumes = as_string_list(decode_field(raw.get("volumes")))
    service.depends_on = as_name_set(decode_field(raw.get("depends_on")))
    service.networks = as_name_set(decode_field(raw.get("networks")))
    service.restart = as_string(decode_field(raw.get("restart")))
    service.command = as_command(decode_field(raw.get("command")))
    return service


def parse_networks(raw: Any) -> List[NetworkDef]:
    if not isinstance(raw, dict):
        return []
    networks = []
    for name, config in raw.items():
        network = NetworkDef(name=str(name))
        if isinstance(config, dict):
            driver = config.get("driver")
            network.driver = driver if isinstance(driver, str) else ""
            network.config = config
        networks.append(network)
    return networks


def parse_descriptor(text: str, *, name: str, path: Path, filename: str) -> ProjectDescriptor:
    """Decode descriptor text. Raises DescriptorParseError only for undecodable documents."""
    document = load_document(text)

    raw_services = document.get("services")
    services: Dict[str, ServiceDef] = {}
    if isinstance(raw_services, dict):
        for service_name, raw in raw_services.items():
            services[str(service_name)] = parse_service(str(service_name), raw)

    return ProjectDescriptor(
        name=name,
        path=path,
        filename=filename,
        services=services,
        networks=parse_networks(document.get("networks")),
    )


# ---------------------------
# Locator
# ---------------------------
def locate_descriptor(project_path: Path, filenames: Iterable[str]) -> Optional[str]:
    """Return the first recognized descriptor filename present, or None."""
    for filename in filenames:
        if (project_path / filename).is_file():
            return filename
    return None


class DescriptorStore:
    """Resolves project names under a root directory to descriptor files."""

    def __init__(self, root: Path, filenames: Iterable[str]):
        self.root = Path(root)
        self.filenames = list(filenames)

    def project_path(self, name: str) -> Path:
        if not name or name in {".", ".."} or "/" in name or "\\" in name:
            raise NotFoundError(f"project not found: {name}")
        path = self.root / name
        if not path.is_dir():
            raise NotFoundError(f"project not found: {name}")
        return path

    def locate(self, name: str) -> tuple[Path, str]:
        path = self.project_path(name)
        filename = locate_descriptor(path, self.filenames)
        if filename is None:
            raise NotFoundError(f"no docker-compose file found in project: {name}")
        return path, filename

    def list_project_dirs(self) -> List[Path]:
        if not self.root.is_dir():
            raise NotFoundError("projects root path is not configured or does not exist")
        return sorted(p for p in self.root.iterdir() if p.is_dir())

    async def read_text(self, name: str) -> str:
        path, filename = self.locate(name)
        return await self._read(path / filename, name, filename)

    async def load(self, name: str) -> ProjectDescriptor:
        path, filename = self.locate(name)
        text = await self._read(path / filename, name, filename)
        try:
            return parse_descriptor(text, name=name, path=path, filename=filename)
        except DescriptorParseError as exc:
            raise DescriptorParseError(f"{name}/{filename}: {exc.message}") from exc

    async def _read(self, file_path: Path, name: str, filename: str) -> str:
        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
                return await f.read()
        except FileNotFoundError as exc:
            raise NotFoundError(f"no docker-compose file found in project: {name}") from exc
        except UnicodeDecodeError as exc:
            raise DescriptorParseError(f"{name}/{filename}: descriptor is not UTF-8 text") from exc
