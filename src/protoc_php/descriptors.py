"""Loading protobuf descriptors and reading them in declaration order."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from typing import Iterable, Iterator, List, Sequence, Set, Tuple

from google.protobuf import descriptor_pb2 as d2
from google.protobuf import descriptor_pool

logger = logging.getLogger(__name__)


def is_repeated(field) -> bool:
    return field.is_repeated


def synthetic_oneof_names(message) -> Set[str]:
    """Names of the oneofs protoc adds around proto3 `optional` fields."""
    proto = d2.DescriptorProto()
    message.CopyToProto(proto)
    return {
        proto.oneof_decl[f.oneof_index].name
        for f in proto.field
        if f.proto3_optional and f.HasField("oneof_index")
    }


def real_oneofs(message) -> List:
    synthetic = synthetic_oneof_names(message)
    return [o for o in message.oneofs if o.name not in synthetic]


def real_containing_oneof(field):
    """The field's oneof, or None when it is only a proto3 `optional` wrapper."""
    oneof = field.containing_oneof
    if oneof is None or oneof.name in synthetic_oneof_names(field.containing_type):
        return None
    return oneof


def containing_chain(descriptor) -> List:
    """Return the descriptor and its enclosing messages, outermost first."""
    chain = [descriptor]
    parent = descriptor.containing_type
    while parent is not None:
        chain.append(parent)
        parent = parent.containing_type
    chain.reverse()
    return chain


def file_proto(file) -> d2.FileDescriptorProto:
    proto = d2.FileDescriptorProto()
    file.CopyToProto(proto)
    return proto


def declared_types(file, proto: d2.FileDescriptorProto) -> Tuple[list, list, list]:
    """Top-level enums, messages and services of ``file`` in declaration order.

    The Python descriptor API only exposes them as by-name maps, so the order
    is taken from the file's own ``FileDescriptorProto``.
    """
    enums = [file.enum_types_by_name[e.name] for e in proto.enum_type]
    messages = [file.message_types_by_name[m.name] for m in proto.message_type]
    services = [file.services_by_name[s.name] for s in proto.service]
    return enums, messages, services


def walk_messages(messages: Sequence) -> Iterator:
    """Yield each message followed by its nested messages (pre-order)."""
    for message in messages:
        yield message
        yield from walk_messages(message.nested_types)


def all_enums(enums: Sequence, messages: Sequence) -> Iterator:
    """Top-level enums first, then enums nested in messages."""
    yield from enums
    for message in walk_messages(messages):
        yield from message.enum_types


def build_pool(files: Iterable[d2.FileDescriptorProto]) -> descriptor_pool.DescriptorPool:
    """Build a private pool; files must come dependencies first, as protoc sends them."""
    pool = descriptor_pool.DescriptorPool()
    for f in files:
        logger.debug("Adding %s to descriptor pool", f.name)
        pool.AddSerializedFile(f.SerializeToString())
    return pool


def parse_proto_via_descriptor(proto_path: str, include_dirs: Sequence[str] = ()):
    """Parse a .proto by invoking protoc to get a descriptor set.

    Returns the ``FileDescriptor`` of ``proto_path`` from a fresh pool.
    """
    includes = [os.path.dirname(os.path.abspath(proto_path))] + list(include_dirs)

    # de-dup while preserving order
    seen = set()
    inc_args: List[str] = []
    for inc in includes:
        if inc and inc not in seen:
            seen.add(inc)
            inc_args.extend(["-I", inc])

    with tempfile.TemporaryDirectory() as td:
        desc_path = os.path.join(td, "descriptor_set.pb")
        cmd = ["protoc", "--include_imports", f"--descriptor_set_out={desc_path}"] + inc_args + [proto_path]
        logger.debug("Running %s", " ".join(cmd))
        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except FileNotFoundError as e:
            raise RuntimeError("'protoc' not found. Please install Protocol Buffers compiler and ensure it is in PATH.") from e
        except subprocess.CalledProcessError as e:
            raise RuntimeError(f"protoc failed: {e.stderr.decode('utf-8', errors='ignore')}") from e

        fds = d2.FileDescriptorSet()
        with open(desc_path, "rb") as f:
            fds.ParseFromString(f.read())

    # protoc names the file relative to the first include dir holding it
    base = os.path.basename(proto_path)
    target = None
    for f in fds.file:
        if f.name == base or f.name.endswith("/" + base):
            target = f
            break
    if target is None:
        names = ", ".join(ff.name for ff in fds.file)
        raise RuntimeError(f"Could not locate target file '{base}' in descriptor set. Found: {names}")

    pool = build_pool(fds.file)
    return pool.FindFileByName(target.name)
