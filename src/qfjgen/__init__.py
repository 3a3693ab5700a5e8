"""
QuickFIX/J Generator (qfjgen) Package

Resolves a FIX Orchestra repository into the set of QuickFIX/J classes that
must be generated for it, and writes them as Java source files.

PIPELINE:
---------
    Orchestra XML / YAML / JSON
        → Repository model        (qfjgen.model)
        → SchemaIndex             (qfjgen.indexer)
        → session partitioning    (qfjgen.partition)
        → field usage             (qfjgen.analyzer)
        → OutputPlan              (qfjgen.config)
        → artifacts               (qfjgen.emitter)
        → Java sources            (qfjgen.backends)

The model knows nothing about Java. Only the backends do.
"""

__version__ = "0.1.0"
