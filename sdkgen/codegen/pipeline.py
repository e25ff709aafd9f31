"""
End-to-end code generation.

Obtains the schema (pre-computed payload or live introspection), links
field parents, selects the backend and drives the regeneration
controller to convergence.
"""

from pathlib import Path
from typing import Optional, TextIO, Tuple, Union

from .. import introspection, utils
from ..logging_config import get_logger
from .core.config import GenerationConfig
from .core.errors import IntrospectionError
from .core.postprocess import CommandExecutor, SubprocessExecutor
from .core.regenerate import (
    DEFAULT_MAX_PASSES,
    GenerationMode,
    GenerationOutcome,
    RegenerationController,
)
from .core.schema import Schema, set_schema_parents
from .registry import get_registry

logger = get_logger(__name__)


def load_schema(
    config: GenerationConfig,
    introspection_file: Optional[Union[str, Path]] = None,
) -> Tuple[Schema, str]:
    """
    Obtain the schema graph for a configuration, with parents linked.

    Sources, in order: ``introspection_file``, ``config.introspection_json``,
    live introspection over ``config.connection``.

    Raises:
        IntrospectionError: If no source is available or loading fails
    """
    if introspection_file is not None:
        schema, version = introspection.parse_introspection_json(
            utils.load_introspection_file(introspection_file)
        )
    elif config.introspection_json is not None:
        schema, version = introspection.parse_introspection_json(
            config.introspection_json
        )
    elif config.connection is not None:
        schema, version = introspection.introspect(config.connection)
    else:
        raise IntrospectionError(
            "No introspection payload or engine connection configured"
        )

    set_schema_parents(schema)
    return schema, version


def generate(
    config: GenerationConfig,
    mode: GenerationMode = GenerationMode.MODULE,
    executor: Optional[CommandExecutor] = None,
    log_writer: Optional[TextIO] = None,
    max_passes: int = DEFAULT_MAX_PASSES,
    fail_on_ceiling: bool = False,
    introspection_file: Optional[Union[str, Path]] = None,
) -> GenerationOutcome:
    """
    Generate code for a configuration and run its post commands.

    Args:
        config: Generation configuration
        mode: Module or client generation
        executor: Runs post commands (defaults to SubprocessExecutor)
        log_writer: Text stream receiving merge and post command lines
        max_passes: Pass ceiling of the regeneration controller
        fail_on_ceiling: Raise instead of warning at the pass ceiling
        introspection_file: Optional JSON file with the introspection payload

    Returns:
        The converged GenerationOutcome

    Raises:
        IntrospectionError: Before anything is written
        GenerationError: A backend failed (carries the pass number)
        MergeError: The output directory could not be updated
        PostProcessError: A post command failed
    """
    for warning in config.validate():
        logger.warning(warning)

    schema, version = load_schema(config, introspection_file)
    generator = get_registry().create_generator(config)

    logger.info(
        f"Generating {generator.language_name} {mode.value} code "
        f"into {config.output_dir}"
    )

    controller = RegenerationController(
        generator,
        max_passes=max_passes,
        fail_on_ceiling=fail_on_ceiling,
        executor=executor if executor is not None else SubprocessExecutor(),
        log_writer=log_writer,
    )
    outcome = controller.run(schema, version, mode)

    logger.info(
        f"Generation converged after {outcome.passes} pass(es), "
        f"{len(outcome.files_written)} file(s) written"
    )
    return outcome
