"""Integration adapters for exchanging documents with other XML libraries.

Each adapter converts a ``Document`` into the element type of a target
library and back. Conversions go through serialized XML, so whatever the
target library accepts and emits is exactly what a round trip through xmlx
preserves. Conversion failures are reported in the returned
``ConversionResult`` rather than raised.
"""

import time
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from xmlx.shared import SerializerConfig, XMLxError, get_logger

from .document import Document

MS_PER_SECOND = 1000


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    Subclasses implement ``_to_element`` and ``_to_bytes``; this class wraps
    them with timing, logging and error reporting.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _to_element(self, data: bytes) -> Any:
        """Parse serialized XML into the target library's root element."""

    @abstractmethod
    def _to_bytes(self, element: Any) -> bytes:
        """Serialize a target library element."""

    @property
    def _conversion_errors(self) -> tuple:
        return (XMLxError, TypeError, ValueError)

    def to_target(self, document: Document) -> ConversionResult:
        """Convert a Document to the target library's root element.

        Args:
            document: Loaded document with exactly one top-level element

        Returns:
            ConversionResult containing the target element
        """
        start_time = time.time()
        try:
            element = self._to_element(document.save_bytes(SerializerConfig.compact()))
        except self._conversion_errors as e:
            return self._create_error_result(
                f"Failed to convert to {self.metadata.target_library}: {e}",
                document,
                start_time
            )

        return ConversionResult(
            success=True,
            converted_data=element,
            original_data=document,
            conversion_time_ms=self._elapsed(start_time),
            metadata={"root_tag": str(element.tag)}
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert a target library element to a Document.

        Args:
            target_data: Element of the target library

        Returns:
            ConversionResult containing the Document
        """
        start_time = time.time()
        if not hasattr(target_data, "tag"):
            return self._create_error_result(
                f"Target data is not a valid {self.metadata.target_library} element",
                target_data,
                start_time
            )

        try:
            data = self._to_bytes(target_data)
            document = Document(correlation_id=self.correlation_id)
            document.load_bytes(data)
        except self._conversion_errors as e:
            return self._create_error_result(
                f"Failed to convert from {self.metadata.target_library}: {e}",
                target_data,
                start_time
            )

        return ConversionResult(
            success=True,
            converted_data=document,
            original_data=target_data,
            conversion_time_ms=self._elapsed(start_time),
            metadata={"xml_length": len(data)}
        )

    def _elapsed(self, start_time: float) -> float:
        return (time.time() - start_time) * MS_PER_SECOND

    def _create_error_result(
        self, error_message: str, original_data: Any, start_time: float
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        self._logger.warning(error_message)
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=self._elapsed(start_time),
            errors=[error_message]
        )


class LxmlAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            target_library="lxml",
            description="Bidirectional conversion between Document and lxml.etree"
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
        except ImportError:
            return False
        return True

    @property
    def _conversion_errors(self) -> tuple:
        import lxml.etree
        return super()._conversion_errors + (lxml.etree.LxmlError,)

    def _to_element(self, data: bytes) -> Any:
        import lxml.etree
        return lxml.etree.fromstring(data)

    def _to_bytes(self, element: Any) -> bytes:
        import lxml.etree
        return lxml.etree.tostring(element, encoding="utf-8")


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="etree",
            target_library="xml.etree.ElementTree",
            description="Bidirectional conversion between Document and ElementTree"
        )

    def is_available(self) -> bool:
        return True

    @property
    def _conversion_errors(self) -> tuple:
        return super()._conversion_errors + (ET.ParseError,)

    def _to_element(self, data: bytes) -> Any:
        return ET.fromstring(data)

    def _to_bytes(self, element: Any) -> bytes:
        return ET.tostring(element, encoding="utf-8")


_ADAPTERS: Dict[str, Type[IntegrationAdapter]] = {
    "lxml": LxmlAdapter,
    "etree": ElementTreeAdapter,
}


def register_adapter(name: str, adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an adapter class under ``name``."""
    _ADAPTERS[name] = adapter_class


def get_adapter(
    adapter_name: str, correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get an adapter instance by name.

    Returns:
        Adapter instance if registered and available, None otherwise
    """
    adapter_class = _ADAPTERS.get(adapter_name)
    if adapter_class is None:
        return None
    adapter = adapter_class(correlation_id)
    return adapter if adapter.is_available() else None


def list_adapters() -> List[AdapterMetadata]:
    """Metadata of every registered adapter whose library is available."""
    adapters = (adapter_class() for adapter_class in _ADAPTERS.values())
    return [adapter.metadata for adapter in adapters if adapter.is_available()]
