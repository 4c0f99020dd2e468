from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from protoc_php.descriptors import parse_proto_via_descriptor
from protoc_php.generator.php_file_generator import PhpFileGenerator
from protoc_php.models import GenerationError, GeneratorOptions

logger = logging.getLogger(__name__)


def _find_proto_files(root: str) -> List[str]:
    files: List[str] = []
    for dirpath, _, filenames in os.walk(root):
        for fn in filenames:
            if fn.lower().endswith(".proto"):
                files.append(os.path.join(dirpath, fn))
    # Sort for deterministic output
    files.sort()
    return files


def generate(
    proto_path: str,
    out_dir: str,
    options: GeneratorOptions,
    include_dirs: Sequence[str] = (),
) -> str:
    """Generate the PHP file for one .proto and return the written path."""
    file = parse_proto_via_descriptor(proto_path, include_dirs)
    generator = PhpFileGenerator(file, options)
    result = generator.generate()
    if not result.ok:
        raise GenerationError(f"{proto_path}: {result.error}")

    out_path = Path(out_dir) / generator.naming.output_path(file.name)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(result.content, encoding="utf-8")
    return str(out_path)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate PHP protobuf classes from .proto files")
    parser.add_argument("--proto", required=True, help="Path to a .proto file or a directory containing .proto files (recursively)")
    parser.add_argument("--out", required=True, help="Output directory for generated .php file(s)")
    parser.add_argument("--namespaces", action="store_true", help="Wrap each file in a namespace derived from its proto package")
    parser.add_argument("-I", "--include", action="append", default=[], help="Additional import directory passed to protoc")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every generation step")
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    options = GeneratorOptions(use_namespaces=args.namespaces)

    if os.path.isdir(args.proto):
        inputs = _find_proto_files(args.proto)
        if not inputs:
            logger.info("No .proto files found under directory: %s", args.proto)
            return 0
    else:
        inputs = [args.proto]

    status = 0
    for p in inputs:
        try:
            out_path = generate(p, args.out, options, args.include)
        except (GenerationError, RuntimeError) as e:
            logger.error("%s", e)
            status = 1
            continue
        logger.info("Generated: %s", out_path)
    return status


if __name__ == "__main__":
    sys.exit(main())
