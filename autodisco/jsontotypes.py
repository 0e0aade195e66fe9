"""Infers types from JSON sample files and writes them as source modules.

This module provides:
- j2ts: Infer a TypeScript type from JSON files
- j2zod: Infer a Zod schema from JSON files
- j2jsons: Infer a JSON Schema from JSON files

Every file (or every line of a JSON Lines file) is one sample of the same
response. The samples are inferred and reconciled into a single type.
"""

import json
import logging
import os
from typing import Any, List

from autodisco.common import safe_identifier
from autodisco.nodetojsons import convert_node_to_json_schema, dump_json_schema
from autodisco.nodewriter import EmitterOptions, emit_module
from autodisco.schema_inference import TypeInferrer
from autodisco.typenode import TypeNode

logger = logging.getLogger(__name__)


def infer_type_from_files(input_files: List[str], sample_size: int = 0) -> TypeNode:
    """Loads the samples in input_files and infers one reconciled type.

    Args:
        input_files: List of JSON or JSON Lines file paths
        sample_size: Maximum number of samples to use (0 = all)

    Returns:
        The reconciled type tree
    """
    if not input_files:
        raise ValueError("At least one input file is required")

    values = _load_json_values(input_files, sample_size)

    if not values:
        raise ValueError("No valid JSON data found in input files")

    return TypeInferrer().infer_from_samples(values)


def convert_json_to_typescript(
    input_files: List[str],
    typescript_file: str,
    type_name: str = 'Document',
    indent: str = '  ',
    minify: bool = False,
    sample_size: int = 0
) -> None:
    """Infers a TypeScript type from JSON files.

    Args:
        input_files: List of JSON file paths to analyze
        typescript_file: Output path for the TypeScript module
        type_name: Name for the exported type
        indent: Indentation string
        minify: Write the module without line breaks
        sample_size: Maximum number of samples to use (0 = all)
    """
    node = infer_type_from_files(input_files, sample_size)
    source = emit_module(node, type_name, 'typescript', EmitterOptions(indent=indent, minify=minify))
    _write_output(typescript_file, source)


def convert_json_to_zod(
    input_files: List[str],
    zod_file: str,
    type_name: str = 'Document',
    indent: str = '  ',
    minify: bool = False,
    sample_size: int = 0
) -> None:
    """Infers a Zod schema from JSON files.

    Args:
        input_files: List of JSON file paths to analyze
        zod_file: Output path for the Zod module
        type_name: Name for the exported schema constant
        indent: Indentation string
        minify: Write the module without line breaks
        sample_size: Maximum number of samples to use (0 = all)
    """
    node = infer_type_from_files(input_files, sample_size)
    source = emit_module(node, type_name, 'zod', EmitterOptions(indent=indent, minify=minify))
    _write_output(zod_file, source)


def convert_json_to_json_schema(
    input_files: List[str],
    json_schema_file: str,
    type_name: str = 'Document',
    indent: str = '  ',
    minify: bool = False,
    sample_size: int = 0
) -> None:
    """Infers a JSON Schema from JSON files.

    Args:
        input_files: List of JSON file paths to analyze
        json_schema_file: Output path for the JSON Schema
        type_name: Title of the schema
        indent: Indentation string
        minify: Write the schema without whitespace
        sample_size: Maximum number of samples to use (0 = all)
    """
    node = infer_type_from_files(input_files, sample_size)
    schema = convert_node_to_json_schema(node, safe_identifier(type_name))
    _write_output(json_schema_file, dump_json_schema(schema, EmitterOptions(indent=indent, minify=minify)))


def _write_output(output_file: str, content: str) -> None:
    # Ensure output directory exists
    output_dir = os.path.dirname(output_file)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(content)
    logger.info("Wrote %s", output_file)


def _load_json_values(input_files: List[str], sample_size: int) -> List[Any]:
    """Loads JSON values from files.

    Handles both single JSON documents and JSON Lines (JSONL) files. A
    document whose root is an array is one sample; it is not flattened.

    Args:
        input_files: List of file paths
        sample_size: Maximum values to load (0 = all)

    Returns:
        List of parsed JSON values
    """
    values: List[Any] = []

    for file_path in input_files:
        if sample_size > 0 and len(values) >= sample_size:
            break

        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read().strip()

        if not content:
            continue

        # Try parsing as a single JSON document first
        try:
            values.append(json.loads(content))
            continue
        except json.JSONDecodeError:
            pass

        # Try parsing as JSON Lines (JSONL)
        for line in content.split('\n'):
            line = line.strip()
            if not line:
                continue
            try:
                values.append(json.loads(line))
                if sample_size > 0 and len(values) >= sample_size:
                    break
            except json.JSONDecodeError:
                logger.warning("Skipping malformed JSON line in %s", file_path)

    return values
