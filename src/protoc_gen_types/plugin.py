"""protoc plugin transport: CodeGeneratorRequest on stdin, CodeGeneratorResponse on stdout.

See https://protobuf.dev/reference/other/.
"""

import sys

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest, CodeGeneratorResponse

from protoc_gen_types import log
from protoc_gen_types.descriptors import load_request
from protoc_gen_types.errors import ProtocTypesError
from protoc_gen_types.exporters.typescript import translate_to_typescript
from protoc_gen_types.options import parse_parameter


def run_plugin(request: CodeGeneratorRequest) -> CodeGeneratorResponse:
    """
    Run one generation pass for a plugin request.

    Args:
        request: The request sent by protoc

    Returns:
        CodeGeneratorResponse: The generated files, or an error and no files
    """
    response = CodeGeneratorResponse()
    response.supported_features = CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL

    try:
        framework, options = parse_parameter(request.parameter)
        _, files = load_request(request)
        generated = translate_to_typescript(options, files, framework, request.parameter)
    except ProtocTypesError as e:
        log.debug(f"Generation failed: {e}")
        response.error = str(e)
        return response

    for name, content in generated.items():
        response.file.add(name=name, content=content)
    return response


def main() -> None:
    """Entry point of the ``protoc-gen-types-only`` executable."""
    request = CodeGeneratorRequest.FromString(sys.stdin.buffer.read())
    response = run_plugin(request)
    sys.stdout.buffer.write(response.SerializeToString(deterministic=True))
    sys.stdout.buffer.flush()


if __name__ == "__main__":
    main()
