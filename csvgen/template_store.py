"""Template persistence - named, replayable generation configurations.

A template binds a source file to the column configurations, row count and
header flag chosen for it. Stores keep all templates in one document shaped
like ``{"templates": [...]}``. The base TemplateStore implements the
load/save semantics; subclasses only move the document in and out.

Typical usage example:
    store = JsonTemplateStore('config.json')
    templates = store.load()

    store.save(Template(
        name='orders',
        source_file='orders.csv',
        column_configs=configs,
        num_records=500,
        include_header=True,
    ))
"""

import copy
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from csvgen.errors import ConfigError, InvalidRowCountError, StoreError
from csvgen.logsetup import get_logger
from csvgen.strategies import GeneratorConfig, config_from_dict
from csvgen.synthesizer import validate_configs


logger = get_logger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class Template:
    """A named generation configuration.

    Attributes:
        name: Unique template name.
        source_file: Source CSV the configuration was built from.
        column_configs: Ordered column configurations.
        num_records: Number of records to generate.
        include_header: Whether the output gets a header row.
        created_at: ISO 8601 timestamp of when the template was saved.
    """

    name: str
    source_file: str
    column_configs: List[GeneratorConfig]
    num_records: int
    include_header: bool = True
    created_at: str = field(default_factory=_now_iso)

    def __post_init__(self) -> None:
        count = self.num_records
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise InvalidRowCountError(
                f"Template '{self.name}': record count must be a positive integer, got {count!r}"
            )
        validate_configs(self.column_configs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the template to its persisted dictionary form."""
        return {
            'name': self.name,
            'sourceFile': self.source_file,
            'columnConfigurations': [config.to_dict() for config in self.column_configs],
            'numRecords': self.num_records,
            'includeHeader': self.include_header,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Template':
        """Create a Template from its persisted dictionary form.

        Args:
            data: Dictionary as produced by ``to_dict``.

        Returns:
            Template instance.

        Raises:
            KeyError: If a required field is missing.
            ConfigError: If a column configuration is invalid.
        """
        entries = data['columnConfigurations']
        if not isinstance(entries, list):
            raise ConfigError(
                f"Template '{data.get('name', '?')}': columnConfigurations must be a list"
            )

        return cls(
            name=data['name'],
            source_file=data['sourceFile'],
            column_configs=[config_from_dict(c) for c in entries],
            num_records=data['numRecords'],
            include_header=data.get('includeHeader', True),
            created_at=data.get('createdAt') or _now_iso(),
        )

    def column_names(self) -> List[str]:
        return [config.header for config in self.column_configs]


class TemplateStore(ABC):
    """Base class for template stores.

    Subclasses provide ``read_document`` and ``write_document``; both raise
    StoreError on failure. ``load`` and ``save`` never raise it.
    """

    @abstractmethod
    def read_document(self) -> Optional[Dict[str, Any]]:
        """Return the stored document, or None if nothing has been stored."""

    @abstractmethod
    def write_document(self, document: Dict[str, Any]) -> None:
        """Replace the stored document."""

    def _load_document(self) -> Dict[str, Any]:
        try:
            document = self.read_document()
        except StoreError as e:
            logger.error("Error loading configurations: %s", e)
            return {'templates': []}

        if not isinstance(document, dict) or not isinstance(document.get('templates'), list):
            if document is not None:
                logger.error("Error loading configurations: document has no template list")
            return {'templates': []}

        return document

    def load(self) -> List[Template]:
        """Load all stored templates in stored order.

        Returns:
            List of templates; empty if the store is missing or unreadable.
            Entries that cannot be parsed are skipped with a warning.
        """
        templates = []
        for entry in self._load_document()['templates']:
            try:
                templates.append(Template.from_dict(entry))
            except (KeyError, TypeError, ConfigError) as e:
                name = entry.get('name', '?') if isinstance(entry, dict) else '?'
                logger.warning("Skipping unreadable template %r: %s", name, e)
        return templates

    def find(self, name: str) -> Optional[Template]:
        """Return the template called ``name``, if stored."""
        for template in self.load():
            if template.name == name:
                return template
        return None

    def save(self, template: Template) -> bool:
        """Store a template, replacing any template with the same name.

        A replaced template keeps its position; a new name is appended.

        Args:
            template: Template to store.

        Returns:
            True on success, False if the document could not be written.
        """
        document = self._load_document()
        entries = document['templates']
        entry = template.to_dict()

        for index, existing in enumerate(entries):
            if isinstance(existing, dict) and existing.get('name') == template.name:
                entries[index] = entry
                break
        else:
            entries.append(entry)

        try:
            self.write_document(document)
        except StoreError as e:
            logger.error("Error saving configuration: %s", e)
            return False

        logger.info("Configuration '%s' saved", template.name)
        return True


class JsonTemplateStore(TemplateStore):
    """Template store backed by a JSON file.

    Attributes:
        filepath: Path of the JSON document.
    """

    def __init__(self, filepath: Union[str, Path] = 'config.json') -> None:
        self.filepath = Path(filepath)

    def read_document(self) -> Optional[Dict[str, Any]]:
        if not self.filepath.exists():
            return None

        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StoreError(f"Could not read {self.filepath}: {e}") from e

    def write_document(self, document: Dict[str, Any]) -> None:
        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            with open(self.filepath, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"Could not write {self.filepath}: {e}") from e


class InMemoryTemplateStore(TemplateStore):
    """Template store that keeps its document in memory."""

    def __init__(self, document: Optional[Dict[str, Any]] = None) -> None:
        self.document = copy.deepcopy(document)

    def read_document(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self.document)

    def write_document(self, document: Dict[str, Any]) -> None:
        self.document = copy.deepcopy(document)
