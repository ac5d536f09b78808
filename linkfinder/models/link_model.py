from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, Optional


class LinkStatus(StrEnum):
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'


@dataclass(frozen=True)
class LinkModel:
    """Represent a reference code to URL mapping.

    Attributes:
        reference_code (str):
            Short human-shared identifier, unique under case-insensitive comparison.
        full_url (str):
            Destination URL (always http:// or https://).
        description (Optional[str]):
            Free text description (max 500 chars).
        brand_name (Optional[str]):
            Brand the link belongs to (max 100 chars).
        status (LinkStatus):
            ACTIVE or INACTIVE. New links are always ACTIVE.
        created_by (Optional[str]):
            Username of the creator. Informational only, the link outlives its creator.
        id (Optional[int]):
            Surrogate id assigned by the data store on insert.
        created_at (Optional[datetime]):
            Creation timestamp (UTC).
        updated_at (Optional[datetime]):
            Last modification timestamp (UTC).

    Example:
        >>> link = LinkModel(reference_code='PI-31001', full_url='https://example.com/doc1.pdf')
        >>> link.status
        <LinkStatus.ACTIVE: 'ACTIVE'>
        >>> link.to_dict()['referenceCode']
        'PI-31001'
    """

    reference_code: str
    full_url: str
    description: Optional[str] = None
    brand_name: Optional[str] = None
    status: LinkStatus = LinkStatus.ACTIVE
    created_by: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the camelCase shape returned by the API."""
        return {
            'id': self.id,
            'referenceCode': self.reference_code,
            'fullUrl': self.full_url,
            'description': self.description,
            'brandName': self.brand_name,
            'status': str(self.status),
            'createdBy': self.created_by,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class LinkRequest:
    """Normalized client input for creating or updating a link.

    Built by `linkfinder.services.validation.validate_link_request()`, so every
    instance already satisfies the field constraints. `status=None` means
    "keep the current status" on update.
    """

    reference_code: str
    full_url: str
    description: Optional[str] = None
    brand_name: Optional[str] = None
    status: Optional[LinkStatus] = field(default=None)
