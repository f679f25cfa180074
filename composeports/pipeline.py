"""The scan pipeline: walk -> filter -> parse -> extract -> format.

Every stage is a generator taking the previous stage's generator, so nothing
is read before the consumer asks for it and only one record is in flight at
each stage boundary. File-level failures travel downstream as
:class:`~composeports.models.PipelineError` values instead of exceptions; one
bad compose file never stops the rest of the scan.
"""
from __future__ import annotations

import os
import re
from typing import Any, Iterable, Iterator, List, Mapping

import yaml

from composeports.log import get_logger
from composeports.models import (
    ExposedService,
    ExposedServiceRecord,
    PipelineError,
    ServiceFileRecord,
)
from composeports.report import format_csv_table

log = get_logger(__name__)

COMPOSE_FILE_RE = re.compile(r"docker-compose.*\.yml", re.DOTALL)
PORT_SEPARATOR = " and "

BLOCK_HEADER = "PATH,SERVICE,PORTS"
ERROR_HEADER = "PATH,ERROR"


class ServiceFileError(ValueError):
    """A compose file parsed but holds no usable ``services`` mapping."""


def _describe(err: Exception) -> PipelineError:
    # YAML errors span several lines; keep each report row on one line.
    return PipelineError(" ".join(str(err).split()) or type(err).__name__)


# -----------------------------------------------------------------------------
# 1. Walk
# -----------------------------------------------------------------------------
def iter_file_paths(root: str) -> Iterator[str]:
    """Yield every regular file under *root*, depth-first, in name order.

    Symlinks are never followed or yielded. A directory that cannot be listed
    is logged and skipped together with everything below it.
    """
    pending: List[str] = [root]
    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as err:
            log.error("Cannot list %s: %s", directory, err)
            continue

        subdirs: List[str] = []
        for entry in entries:
            path = os.path.join(directory, entry.name)
            if entry.is_symlink():
                log.debug("Not following symlink %s", path)
            elif entry.is_dir(follow_symlinks=False):
                subdirs.append(path)
            elif entry.is_file(follow_symlinks=False):
                log.trace("Found %s", path)  # type: ignore[attr-defined]
                yield path

        # reversed so the first sub-directory is popped first
        pending.extend(reversed(subdirs))


# -----------------------------------------------------------------------------
# 2. Filter
# -----------------------------------------------------------------------------
def is_compose_file(path: str) -> bool:
    return COMPOSE_FILE_RE.fullmatch(os.path.basename(path)) is not None


def filter_compose_paths(paths: Iterable[str]) -> Iterator[str]:
    for path in paths:
        if is_compose_file(path):
            yield path


# -----------------------------------------------------------------------------
# 3. Parse
# -----------------------------------------------------------------------------
def load_services(path: str) -> Mapping[str, Any]:
    """Read *path* and return its top-level ``services`` mapping."""
    with open(path, "r", encoding="utf-8") as fh:
        document = yaml.safe_load(fh)

    if not isinstance(document, dict):
        raise ServiceFileError("document is not a mapping")
    if "services" not in document:
        raise ServiceFileError("no 'services' key")

    services = document["services"] or {}
    if not isinstance(services, dict):
        raise ServiceFileError("'services' is not a mapping")
    return services


def parse_service_files(paths: Iterable[str]) -> Iterator[ServiceFileRecord]:
    for path in paths:
        log.trace("Parsing %s", path)  # type: ignore[attr-defined]
        try:
            services = load_services(path)
        except (OSError, UnicodeDecodeError, yaml.YAMLError, ServiceFileError) as err:
            log.error("Failed to read services from %s: %s", path, err)
            yield ServiceFileRecord(path, error=_describe(err))
            continue
        log.debug("%s declares %d service(s)", path, len(services))
        yield ServiceFileRecord(path, services)


# -----------------------------------------------------------------------------
# 4. Extract
# -----------------------------------------------------------------------------
def format_port(port: Any) -> str:
    """Render one ``ports`` entry; long-syntax mappings become ``ip:published:target/proto``."""
    if not isinstance(port, dict):
        return str(port)

    target = port.get("target", "")
    published = port.get("published")
    if published in (None, ""):
        text = str(target)
    else:
        text = f"{published}:{target}"
        if port.get("host_ip"):
            text = f"{port['host_ip']}:{text}"
    if port.get("protocol"):
        text = f"{text}/{port['protocol']}"
    return text


def exposed_services(services: Mapping[str, Any]) -> List[ExposedService]:
    exposed: List[ExposedService] = []
    for name, declaration in services.items():
        ports = declaration.get("ports") if isinstance(declaration, dict) else None
        if not ports:
            continue
        if not isinstance(ports, list):
            ports = [ports]
        exposed.append(
            ExposedService(str(name), PORT_SEPARATOR.join(format_port(p) for p in ports))
        )
    return exposed


def extract_exposed_services(
    records: Iterable[ServiceFileRecord],
) -> Iterator[ExposedServiceRecord]:
    for record in records:
        if not record.ok:
            yield ExposedServiceRecord(record.path, error=record.error)
            continue
        yield ExposedServiceRecord(
            record.path, tuple(exposed_services(record.services))
        )


# -----------------------------------------------------------------------------
# 5. Format
# -----------------------------------------------------------------------------
def format_block(record: ExposedServiceRecord) -> str:
    """Render one file as a self-contained CSV snippet with its own header."""
    if not record.ok:
        message = str(record.error).replace('"', '""')
        return f'{ERROR_HEADER}\n{record.path},"{message}"\n'

    rows = "".join(f",{svc.name},{svc.ports}\n" for svc in record.exposed_services)
    return f"{BLOCK_HEADER}\n{record.path},,\n{rows}\n"


def format_csv_blocks(records: Iterable[ExposedServiceRecord]) -> Iterator[str]:
    for record in records:
        yield format_block(record)


# -----------------------------------------------------------------------------
# Composition
# -----------------------------------------------------------------------------
FORMATS = ("blocks", "table")


def iter_exposed_services(root: str) -> Iterator[ExposedServiceRecord]:
    return extract_exposed_services(
        parse_service_files(filter_compose_paths(iter_file_paths(root)))
    )


def build_pipeline(root: str, output_format: str = "blocks") -> Iterator[str]:
    """Compose the stages over *root*; nothing runs until the result is iterated."""
    if output_format == "blocks":
        return format_csv_blocks(iter_exposed_services(root))
    if output_format == "table":
        return format_csv_table(iter_exposed_services(root))
    raise ValueError(f"Unknown output format: {output_format}")
