"""protoc plugin entry point: ``protoc --php_out=namespaces:OUT_DIR foo.proto``."""

from __future__ import annotations

import logging
import os
import sys

from google.protobuf.compiler import plugin_pb2

from protoc_php.descriptors import build_pool
from protoc_php.generator.php_file_generator import PhpFileGenerator
from protoc_php.models import GeneratorOptions

logger = logging.getLogger(__name__)


def generate_code(request: plugin_pb2.CodeGeneratorRequest) -> plugin_pb2.CodeGeneratorResponse:
    """Generate one PHP file per requested proto file."""
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    options = GeneratorOptions.from_parameter(request.parameter)
    pool = build_pool(request.proto_file)

    for file_name in request.file_to_generate:
        generator = PhpFileGenerator(pool.FindFileByName(file_name), options)
        result = generator.generate()
        if not result.ok:
            response.error = f"{file_name}: {result.error}"
            # protoc ignores files once an error is set
            del response.file[:]
            break
        response.file.add(
            name=generator.naming.output_path(file_name),
            content=result.content,
        )
        logger.debug("Generated %s", file_name)

    return response


def main() -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("PROTOC_GEN_PHP_LOG_LEVEL", "WARNING").upper(),
        format="protoc-gen-php: %(levelname)s %(name)s: %(message)s",
    )
    request = plugin_pb2.CodeGeneratorRequest.FromString(sys.stdin.buffer.read())
    response = generate_code(request)
    sys.stdout.buffer.write(response.SerializeToString())


if __name__ == "__main__":
    main()
