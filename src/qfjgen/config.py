"""
Output Planner: generator configuration and target package layout.

GeneratorConfig is a single validated value. The one cross-field rule
(session exclusion vs. dedicated session package) is checked whenever a
value is constructed, including every `with_options` change, so an invalid
combination can never exist.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict

QUICKFIX = "quickfix"
COMPONENT = "component"
FIXT11 = "fixt11"
FIELD_PACKAGE = "quickfix.field"

DECIMAL_FIELD = "DecimalField"
DOUBLE_FIELD = "DoubleField"

DEFAULT_OUTPUT_DIR = "target/generated-sources"

# Config attribute -> command-line flag
OPTION_FLAGS: Dict[str, str] = {
    "use_extended_decimal": "--disable-big-decimal",
    "emit_base_message_class": "--generate-message-base-class",
    "exclude_session_layer": "--exclude-session",
    "emit_dedicated_session_package": "--generate-fixt11-package",
}


class ConfigurationError(Exception):
    """Raised when generator options are combined in an invalid way."""

    def __init__(self, first_option: str, second_option: str):
        self.options = (first_option, second_option)
        super().__init__(
            f"Options {first_option} ({OPTION_FLAGS[first_option]}) == True and "
            f"{second_option} ({OPTION_FLAGS[second_option]}) == True are mutually exclusive."
        )


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Generation switches.

    Properties:
        use_extended_decimal:
            Decimal-valued fields extend DecimalField (BigDecimal) if True,
            DoubleField otherwise
        emit_base_message_class:
            Generate the Message base class and the StandardHeader /
            StandardTrailer components; when False those components are
            never entered while resolving members
        exclude_session_layer:
            Omit session messages, session-exclusive groups and fields
            used by the session layer
        emit_dedicated_session_package:
            Place session artifacts in the fixt11 package instead of the
            application package

    INVARIANT:
        exclude_session_layer and emit_dedicated_session_package are never
        both True.
    """

    use_extended_decimal: bool = True
    emit_base_message_class: bool = False
    exclude_session_layer: bool = False
    emit_dedicated_session_package: bool = True

    def __post_init__(self) -> None:
        if self.exclude_session_layer and self.emit_dedicated_session_package:
            raise ConfigurationError("exclude_session_layer", "emit_dedicated_session_package")

    def with_options(self, **changes: bool) -> "GeneratorConfig":
        """Return a validated copy with some switches changed."""
        return replace(self, **changes)

    @property
    def decimal_kind(self) -> str:
        return DECIMAL_FIELD if self.use_extended_decimal else DOUBLE_FIELD

    @property
    def include_header_trailer(self) -> bool:
        return self.emit_base_message_class

    @property
    def emit_session_layer(self) -> bool:
        return not self.exclude_session_layer

    @property
    def session_in_dedicated_package(self) -> bool:
        return self.emit_session_layer and self.emit_dedicated_session_package


def get_package(*parts: str) -> str:
    return ".".join(parts)


def version_segment(version: str) -> str:
    """
    Package segment for a repository version.

    The extension-pack suffix is split off and dots removed:
        FIX.Latest_EP269 -> fixlatest
        FIX.4.4 -> fix44
    """
    base = version.split("_")[0]
    return base.replace(".", "").lower()


@dataclass(frozen=True)
class OutputPlan:
    """Concrete package targets for one generation run."""

    config: GeneratorConfig
    version_segment: str
    field_package: str
    component_package: str
    message_package: str
    dedicated_session_package: str
    dedicated_session_component_package: str

    @property
    def session_message_package(self) -> str:
        if self.config.session_in_dedicated_package:
            return self.dedicated_session_package
        return self.message_package

    @property
    def session_component_package(self) -> str:
        if self.config.session_in_dedicated_package:
            return self.dedicated_session_component_package
        return self.component_package

    @staticmethod
    def package_path(output_dir: Path, package: str) -> Path:
        return Path(output_dir).joinpath(*package.split("."))

    def class_path(self, output_dir: Path, package: str, class_name: str, extension: str = ".java") -> Path:
        """Location of a generated class: <output_dir>/<package path>/<ClassName><ext>."""
        return self.package_path(output_dir, package) / f"{class_name}{extension}"


def plan_output(config: GeneratorConfig, version: str) -> OutputPlan:
    """Compute target packages for a repository version under a configuration."""
    segment = version_segment(version)
    return OutputPlan(
        config=config,
        version_segment=segment,
        field_package=FIELD_PACKAGE,
        component_package=get_package(QUICKFIX, segment, COMPONENT),
        message_package=get_package(QUICKFIX, segment),
        dedicated_session_package=get_package(QUICKFIX, FIXT11),
        dedicated_session_component_package=get_package(QUICKFIX, FIXT11, COMPONENT),
    )


__all__ = [
    "ConfigurationError",
    "GeneratorConfig",
    "OutputPlan",
    "OPTION_FLAGS",
    "DEFAULT_OUTPUT_DIR",
    "DECIMAL_FIELD",
    "DOUBLE_FIELD",
    "FIELD_PACKAGE",
    "plan_output",
    "version_segment",
]
