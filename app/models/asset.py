"""
Asset model definition.

This module defines the `Asset` domain entity persisted by the asset store,
and the `DataAddress` value object describing where and how the asset's
data is fetched.

An asset is stored as an immutable snapshot: every write replaces the whole
document, including the data address. There is no field-level merge.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from app.util.clock import now_millis


class DataAddress(BaseModel):
    """
    Location and access parameters of an asset's data.

    Only the ``type`` property is required; every other property is kept
    verbatim and is interpreted by the data plane, not by this service.

    Example:
        >>> address = DataAddress(properties={
        ...     "type": "HttpData",
        ...     "baseUrl": "https://data.server.com/weather",
        ... })
        >>> address.type
        'HttpData'
    """

    properties: Dict[str, str]
    """Raw data address properties (e.g. `type`, `baseUrl`, `proxyPath`)."""

    @field_validator("properties")
    @classmethod
    def require_type(cls, v):
        if not v.get("type"):
            raise ValueError("DataAddress must have a type property")
        return v

    @property
    def type(self) -> str:
        return self.properties["type"]


class Asset(BaseModel):
    """
    Represents an asset offered by the connector.

    Example:
        >>> asset = Asset(
        ...     id="asset-001",
        ...     dataAddress=DataAddress(properties={"type": "HttpData"}),
        ...     properties={"name": "Weather Dataset"},
        ... )
        >>> asset.id
        'asset-001'
    """

    id: str
    """Unique identifier of the asset."""

    dataAddress: DataAddress
    """Where and how the asset's data is fetched."""

    properties: Dict[str, Any] = Field(default_factory=dict)
    """Public asset metadata, exposed in catalogs."""

    privateProperties: Dict[str, Any] = Field(default_factory=dict)
    """Provider-only metadata, never exposed externally."""

    createdAt: int = Field(default_factory=now_millis)
    """Creation timestamp in epoch milliseconds."""
