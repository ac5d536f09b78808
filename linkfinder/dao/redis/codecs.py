"""Conversions between data models and Redis hashes.

Redis hashes only hold strings, so optional fields are stored as '' and
timestamps as ISO-8601 UTC strings (which also makes them sortable with
`SORT ... ALPHA`).
"""

from datetime import datetime
from typing import Optional

from linkfinder.types import RedisHash
from linkfinder.models import LinkModel, LinkStatus, UserModel, Role


def _encode_optional(value: Optional[str]) -> str:
    return '' if value is None else value


def _decode_optional(value: Optional[str]) -> Optional[str]:
    return value or None


def _encode_datetime(value: Optional[datetime]) -> str:
    return '' if value is None else value.isoformat()


def _decode_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def link_to_hash(link: LinkModel) -> RedisHash:
    return {
        'id': str(link.id),
        'reference_code': link.reference_code,
        'full_url': link.full_url,
        'description': _encode_optional(link.description),
        'brand_name': _encode_optional(link.brand_name),
        'status': str(link.status),
        'created_by': _encode_optional(link.created_by),
        'created_at': _encode_datetime(link.created_at),
        'updated_at': _encode_datetime(link.updated_at),
    }


def hash_to_link(data: RedisHash) -> LinkModel:
    return LinkModel(
        id=int(data['id']),
        reference_code=data['reference_code'],
        full_url=data['full_url'],
        description=_decode_optional(data.get('description')),
        brand_name=_decode_optional(data.get('brand_name')),
        status=LinkStatus(data.get('status') or LinkStatus.ACTIVE),
        created_by=_decode_optional(data.get('created_by')),
        created_at=_decode_datetime(data.get('created_at')),
        updated_at=_decode_datetime(data.get('updated_at')),
    )


def user_to_hash(user: UserModel) -> RedisHash:
    return {
        'id': str(user.id),
        'username': user.username,
        'email': user.email,
        'password_hash': user.password_hash,
        'role': str(user.role),
        'created_at': _encode_datetime(user.created_at),
    }


def hash_to_user(data: RedisHash) -> UserModel:
    return UserModel(
        id=int(data['id']),
        username=data['username'],
        email=data['email'],
        password_hash=data['password_hash'],
        role=Role(data['role']),
        created_at=_decode_datetime(data.get('created_at')),
    )
