"""
Generation pipeline: Repository → artifacts → Java source tree.

    1. Resolve the repository into artifacts (qfjgen.emitter)
    2. Render each artifact (qfjgen.backends.quickfixj)
    3. Write one file per artifact under <output_dir>/<package path>/

Configuration errors are raised before anything is written. I/O errors abort
the run; files already written are left in place.
"""

from pathlib import Path
from typing import Optional, Union

from qfjgen.analyzer import GenerationReport
from qfjgen.backends.quickfixj import ARTIFACT_FILE_EXTENSION, render_artifact
from qfjgen.config import GeneratorConfig, OutputPlan
from qfjgen.emitter import Artifact, emit_artifacts
from qfjgen.model import Repository
from qfjgen.partition import DEFAULT_REGISTRY, SessionLayerRegistry
from qfjgen.serialization import load_repository


def artifact_path(plan: OutputPlan, output_dir: Union[str, Path], artifact: Artifact) -> Path:
    return plan.class_path(Path(output_dir), artifact.package, artifact.class_name, ARTIFACT_FILE_EXTENSION)


def write_artifact(path: Path, artifact: Artifact) -> None:
    """Render an artifact and save it, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    source = render_artifact(artifact)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(source)


def generate(
    repository: Repository,
    output_dir: Union[str, Path],
    config: Optional[GeneratorConfig] = None,
    registry: SessionLayerRegistry = DEFAULT_REGISTRY,
) -> GenerationReport:
    """
    Generate QuickFIX/J sources for a repository.

    Args:
        repository: Loaded Orchestra repository
        output_dir: Root of the generated source tree
        config: Generation switches (defaults to GeneratorConfig())
        registry: Session-layer identifiers

    Returns:
        GenerationReport listing written files and schema warnings

    Raises:
        OSError: If a directory or file cannot be written
    """
    config = config or GeneratorConfig()
    output_dir = Path(output_dir)
    result = emit_artifacts(repository, config, registry)

    report = GenerationReport(
        repository_name=repository.name,
        version=repository.version,
        output_dir=output_dir,
        application_field_count=len(result.usage.application_field_ids),
        session_field_count=len(result.usage.session_field_ids),
    )

    for artifact in result.artifacts:
        path = artifact_path(result.plan, output_dir, artifact)
        write_artifact(path, artifact)
        report.record(artifact.kind, path)

    for msg in result.index.diagnostics:
        report.add_warning(msg)

    return report


def generate_from_file(
    repository_file: Union[str, Path],
    output_dir: Union[str, Path],
    config: Optional[GeneratorConfig] = None,
    registry: SessionLayerRegistry = DEFAULT_REGISTRY,
) -> GenerationReport:
    """Load a repository file (XML, YAML or JSON) and generate sources from it."""
    return generate(load_repository(repository_file), output_dir, config, registry)


__all__ = ["artifact_path", "generate", "generate_from_file", "write_artifact"]
