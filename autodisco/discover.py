"""Offline discovery run over recorded endpoint samples.

The input is a probe-results document that groups decoded response samples
by HTTP method and endpoint path:

    {
        "get": {
            "/posts": [<sample>, <sample>],
            "/users/{id}": [<sample>]
        },
        "post": {
            "/users": [<sample>]
        }
    }

Each endpoint maps to a list of samples. A response whose root is an array
is written as a one-element list holding that array.

For every endpoint the samples are inferred and reconciled into one type,
and the requested flavors are written below the output directory:

    <out>/zod/<method>/<TypeName>.ts
    <out>/typescript/<method>/<TypeName>.ts
    <out>/json/<method>/<TypeName>.json
    <out>/API.md
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Set

from autodisco.common import resolve_type_name, safe_identifier
from autodisco.nodetojsons import convert_node_to_json_schema, dump_json_schema
from autodisco.nodetomd import convert_endpoints_to_markdown
from autodisco.nodewriter import EmitterOptions, emit_module
from autodisco.schema_inference import TypeInferrer
from autodisco.typenode import TypeNode

logger = logging.getLogger(__name__)

HTTP_METHODS = ['get', 'put', 'post', 'patch', 'delete']
GENERATORS = ['zod', 'typescript', 'json', 'markdown']


@dataclass
class EndpointSchema:
    """The inferred type of one endpoint."""
    method: str
    path: str
    type_name: str
    node: TypeNode


def infer_endpoints(probe_results: Dict[str, Dict[str, List[Any]]]) -> List[EndpointSchema]:
    """
    Infers one type per endpoint of a probe-results document.

    Endpoints without samples are skipped with a warning. Type names are
    derived from the path and made unique per method.

    Args:
        probe_results: Samples grouped by method and path

    Returns:
        The endpoint types, in document order
    """
    if not isinstance(probe_results, dict):
        raise ValueError("Probe results must map HTTP methods to endpoints")

    inferrer = TypeInferrer()
    endpoints: List[EndpointSchema] = []
    for method, paths in probe_results.items():
        method = method.lower()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method '{method}'")
        if not isinstance(paths, dict):
            raise ValueError(f"Endpoints for method '{method}' must be an object")
        used_names: Set[str] = set()
        for path, samples in paths.items():
            if not isinstance(samples, list):
                raise ValueError(f"Samples for {method.upper()} {path} must be a list")
            if not samples:
                logger.warning("No samples for %s %s, skipping", method.upper(), path)
                continue
            base_name = safe_identifier(resolve_type_name(path) or 'Root')
            type_name = base_name
            suffix = 1
            while type_name in used_names:
                suffix += 1
                type_name = f"{base_name}{suffix}"
            used_names.add(type_name)
            node = inferrer.infer_from_samples(samples)
            logger.debug("Inferred %s for %s %s", type_name, method.upper(), path)
            endpoints.append(EndpointSchema(method=method, path=path, type_name=type_name, node=node))
    return endpoints


def discover(
    probe_results: Dict[str, Dict[str, List[Any]]],
    output_dir: str = 'autodisco',
    generate: Optional[Sequence[str]] = None,
    indent: str = '  ',
    minify: bool = False
) -> List[EndpointSchema]:
    """
    Infers endpoint types and writes the requested output flavors.

    Args:
        probe_results: Samples grouped by method and path
        output_dir: Root directory for the generated files
        generate: Flavors to write, any of 'zod', 'typescript', 'json', 'markdown'. Defaults to 'zod'.
        indent: Indentation string
        minify: Write output without line breaks

    Returns:
        The endpoint types
    """
    generate = list(generate) if generate else ['zod']
    for generator in generate:
        if generator not in GENERATORS:
            raise ValueError(f"Unknown generator '{generator}', expected one of {', '.join(GENERATORS)}")

    options = EmitterOptions(indent=indent, minify=minify)
    endpoints = infer_endpoints(probe_results)

    for endpoint in endpoints:
        if 'zod' in generate:
            _write(os.path.join(output_dir, 'zod', endpoint.method, f"{endpoint.type_name}.ts"),
                   emit_module(endpoint.node, endpoint.type_name, 'zod', options))
        if 'typescript' in generate:
            _write(os.path.join(output_dir, 'typescript', endpoint.method, f"{endpoint.type_name}.ts"),
                   emit_module(endpoint.node, endpoint.type_name, 'typescript', options))
        if 'json' in generate:
            schema = convert_node_to_json_schema(endpoint.node, endpoint.type_name)
            _write(os.path.join(output_dir, 'json', endpoint.method, f"{endpoint.type_name}.json"),
                   dump_json_schema(schema, options))

    if 'markdown' in generate:
        _write(os.path.join(output_dir, 'API.md'), convert_endpoints_to_markdown(endpoints, indent=indent))

    logger.info("Discovery completed for %d endpoints", len(endpoints))
    return endpoints


def discover_file(
    probe_results_file: str,
    output_dir: str = 'autodisco',
    generate: Optional[Sequence[str]] = None,
    indent: str = '  ',
    minify: bool = False
) -> List[EndpointSchema]:
    """Runs `discover` over a probe-results document stored as JSON."""
    with open(probe_results_file, 'r', encoding='utf-8') as f:
        probe_results = json.load(f)
    return discover(probe_results, output_dir, generate, indent, minify)


def _write(output_file: str, content: str) -> None:
    output_dir = os.path.dirname(output_file)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(content)
    logger.info("Wrote %s", output_file)
