#!/usr/bin/env python3
"""
Complete Pipeline Demo: Repository → Analysis → QuickFIX/J Sources

Shows the full workflow on the bundled example repository:
1. Build the repository model
2. Partition messages and collect field usage
3. Plan output packages
4. Generate Java sources (default and session-excluded configurations)
"""

import sys
import tempfile
from pathlib import Path

from qfjgen.analyzer import resolve_field_usage
from qfjgen.config import GeneratorConfig, plan_output
from qfjgen.examples import build_example_repository
from qfjgen.generator import generate
from qfjgen.indexer import build_index
from qfjgen.partition import partition_messages
from qfjgen.serialization import repository_to_yaml


def main():
    output_root = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(tempfile.mkdtemp(prefix="qfjgen_"))

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Repository → Analysis → QuickFIX/J")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Build Repository
    # =========================================================================
    print("\n1. BUILDING REPOSITORY...")
    repository = build_example_repository()
    print(f"   ✓ Repository: {repository.name} ({repository.version})")
    print(f"   ✓ Fields: {len(repository.fields)}")
    print(f"   ✓ Components: {len(repository.components)}")
    print(f"   ✓ Groups: {len(repository.groups)}")
    print(f"   ✓ Messages: {len(repository.messages)}")

    yaml_path = output_root / "repository.yaml"
    yaml_path.parent.mkdir(parents=True, exist_ok=True)
    yaml_path.write_text(repository_to_yaml(repository), encoding="utf-8")
    print(f"   ✓ Saved YAML: {yaml_path}")

    # =========================================================================
    # STEP 2: Analyze
    # =========================================================================
    print("\n2. ANALYZING FIELD USAGE...")
    index = build_index(repository)
    application, session = partition_messages(repository.messages)
    usage = resolve_field_usage(application, session, index, include_header_trailer=False)
    print(f"   ✓ Application messages: {[m.name for m in application]}")
    print(f"   ✓ Session messages: {[m.name for m in session]}")
    print(f"   ✓ Application fields: {sorted(usage.application_field_ids)}")
    print(f"   ✓ Session fields: {sorted(usage.session_field_ids)}")

    # =========================================================================
    # STEP 3: Plan Output
    # =========================================================================
    print("\n3. PLANNING OUTPUT...")
    configs = {
        "default": GeneratorConfig(),
        "exclude_session": GeneratorConfig(exclude_session_layer=True, emit_dedicated_session_package=False),
    }
    for label, config in configs.items():
        plan = plan_output(config, repository.version)
        print(f"   {label}:")
        print(f"      messages → {plan.message_package}")
        print(f"      components → {plan.component_package}")
        print(f"      session messages → {plan.session_message_package}")

    # =========================================================================
    # STEP 4: Generate
    # =========================================================================
    print("\n4. GENERATING SOURCES...")
    for label, config in configs.items():
        report = generate(repository, output_root / label, config)
        print(f"   ✓ {label}: {report.total_files} files in {report.output_dir}")
        for kind, count in sorted(report.artifact_counts.items()):
            print(f"      {kind}: {count}")
        for warning in report.warnings:
            print(f"      ! {warning}")

    print("\n" + "=" * 80)
    print("DEMO COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    main()
