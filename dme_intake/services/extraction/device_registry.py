"""
Device Registry.

Loads the ordered list of recognizable DME devices from configuration.
Configuration is optional: when it is absent, empty, or malformed the
built-in default list is used, so a usable registry is always returned.

Accepted configuration sources:
- None (defaults)
- a sequence of mappings or DeviceDefinition objects
- a mapping holding that sequence under "dme_devices", "DmeDevices" or "devices"
- a path to a YAML or JSON file holding either of the above
- inline YAML or JSON text (a string starting with "[" or "{"), as supplied
  by the DME_DEVICES setting
"""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from dme_intake.core.enums import DeviceName, RegistrySource
from dme_intake.schemas.dme import DeviceDefinition
from dme_intake.utils.errors import ConfigurationLoadError
from dme_intake.utils.logging import get_logger

logger = get_logger(__name__)


DEVICE_SECTION_KEYS = ("dme_devices", "DmeDevices", "devices")

INLINE_CONFIG_PREFIXES = ("[", "{")

DEFAULT_DEVICE_DEFINITIONS: tuple[DeviceDefinition, ...] = (
    DeviceDefinition(
        name=DeviceName.CPAP.value,
        keywords=("CPAP", "continuous positive airway pressure"),
        priority=1,
    ),
    DeviceDefinition(
        name=DeviceName.OXYGEN_TANK.value,
        keywords=("oxygen", "O2", "oxygen tank"),
        priority=2,
    ),
    DeviceDefinition(
        name=DeviceName.WHEELCHAIR.value,
        keywords=("wheelchair", "mobility chair"),
        priority=3,
    ),
)


@dataclass(frozen=True)
class DeviceRegistry:
    """
    Priority-ordered, read-only set of device definitions.

    Iteration yields definitions in classification order: ascending
    priority, ties in configuration order.
    """

    definitions: tuple[DeviceDefinition, ...]
    source: RegistrySource = RegistrySource.CONFIGURED
    load_error: Optional[str] = None

    def __iter__(self) -> Iterator[DeviceDefinition]:
        return iter(self.definitions)

    def __len__(self) -> int:
        return len(self.definitions)

    @property
    def device_names(self) -> list[str]:
        """Device labels in classification order."""
        return [definition.name for definition in self.definitions]

    @property
    def is_default(self) -> bool:
        """Check if the built-in device list is in use."""
        return self.source == RegistrySource.DEFAULT

    def get(self, name: str) -> Optional[DeviceDefinition]:
        """Look up a definition by its canonical name."""
        for definition in self.definitions:
            if definition.name == name:
                return definition
        return None


def order_by_priority(
    definitions: Sequence[DeviceDefinition],
) -> tuple[DeviceDefinition, ...]:
    """Sort definitions by ascending priority, keeping input order on ties."""
    return tuple(sorted(definitions, key=lambda definition: definition.priority))


def get_default_registry(load_error: Optional[str] = None) -> DeviceRegistry:
    """Build a registry from the built-in device list."""
    return DeviceRegistry(
        definitions=order_by_priority(DEFAULT_DEVICE_DEFINITIONS),
        source=RegistrySource.DEFAULT,
        load_error=load_error,
    )


def load_device_registry(source: Any = None) -> DeviceRegistry:
    """
    Load the device registry from a configuration source.

    Args:
        source: Device configuration (see module docstring)

    Returns:
        DeviceRegistry; the default registry when the source is absent,
        empty, or cannot be loaded. The failure reason, if any, is kept
        on ``load_error``.
    """
    try:
        entries = _read_device_entries(source)
        if not entries:
            logger.warning(
                "No DME device configurations found. Using default configurations."
            )
            registry = get_default_registry()
        else:
            registry = DeviceRegistry(
                definitions=order_by_priority(_parse_definitions(entries)),
                source=RegistrySource.CONFIGURED,
            )
    except ConfigurationLoadError as e:
        logger.error(f"Error loading DME device configurations: {e}. Using defaults.")
        registry = get_default_registry(load_error=str(e))

    logger.info(
        f"Loaded {len(registry)} DME device configurations ({registry.source.value})"
    )
    for definition in registry:
        logger.debug(
            f"Device: {definition.name}, Keywords: [{', '.join(definition.keywords)}], "
            f"Priority: {definition.priority}"
        )
    return registry


def load_device_definitions(source: Any = None) -> tuple[DeviceDefinition, ...]:
    """Load only the ordered device definitions from a configuration source."""
    return load_device_registry(source).definitions


def _read_device_entries(source: Any) -> Optional[Sequence[Any]]:
    """Resolve a configuration source to its raw list of device entries."""
    if source is None:
        return None

    if isinstance(source, str) and source.lstrip().startswith(INLINE_CONFIG_PREFIXES):
        return _parse_device_text(source, "inline device configuration")

    if isinstance(source, (str, Path)):
        return _read_device_file(Path(source))

    if isinstance(source, Mapping):
        return _section_from_mapping(source)

    if isinstance(source, Sequence):
        return source

    raise ConfigurationLoadError(
        f"Unsupported device configuration source: {type(source).__name__}"
    )


def _read_device_file(path: Path) -> Optional[Sequence[Any]]:
    """Read device entries from a YAML or JSON file."""
    if not path.exists():
        logger.warning(f"Device configuration file not found: {path}")
        return None

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationLoadError(
            f"Cannot read device configuration file: {e}", source=str(path)
        ) from e
    except UnicodeDecodeError as e:
        raise ConfigurationLoadError(
            f"Malformed device configuration file: {e}", source=str(path)
        ) from e

    return _parse_device_text(text, str(path))


def _parse_device_text(text: str, label: str) -> Optional[Sequence[Any]]:
    """Parse YAML or JSON device configuration text."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationLoadError(
            f"Malformed device configuration in {label}: {e}", source=label
        ) from e

    if data is None:
        return None
    if isinstance(data, Mapping):
        return _section_from_mapping(data)
    return _as_entry_list(data, label)


def _section_from_mapping(data: Mapping[str, Any]) -> Optional[Sequence[Any]]:
    """Find the device list inside a larger configuration mapping."""
    for key in DEVICE_SECTION_KEYS:
        if key in data:
            return _as_entry_list(data[key], key)
    return None


def _as_entry_list(section: Any, label: str) -> Optional[Sequence[Any]]:
    """Check that a configuration section holds a list of entries."""
    if section is None:
        return None
    if isinstance(section, Sequence) and not isinstance(section, (str, bytes)):
        return section
    raise ConfigurationLoadError(
        f"Device configuration '{label}' must be a list, got {type(section).__name__}"
    )


def _parse_definitions(entries: Sequence[Any]) -> list[DeviceDefinition]:
    """Validate raw entries into DeviceDefinition objects."""
    if isinstance(entries, (str, bytes)):
        raise ConfigurationLoadError("Device configuration must be a list of entries")

    definitions = []
    for index, entry in enumerate(entries):
        if isinstance(entry, DeviceDefinition):
            definitions.append(entry)
            continue
        if not isinstance(entry, Mapping):
            raise ConfigurationLoadError(
                f"Device entry #{index} must be a mapping, got {type(entry).__name__}"
            )
        try:
            definitions.append(DeviceDefinition.model_validate(dict(entry)))
        except ValidationError as e:
            raise ConfigurationLoadError(
                f"Invalid device entry #{index}: {e.error_count()} validation error(s)"
            ) from e
    return definitions
