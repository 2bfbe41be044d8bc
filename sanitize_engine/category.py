"""Categories of sensitive values; a category decides the replacement format."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

_BUILTIN_TAGS = (
    "email",
    "name",
    "phone",
    "credit_card",
    "ssn",
    "ipv4",
    "ipv6",
    "mac_address",
    "hostname",
    "container_id",
    "uuid",
    "jwt",
    "auth_token",
    "file_path",
    "windows_sid",
    "url",
    "aws_arn",
    "azure_resource_id",
)


@dataclass(frozen=True)
class Category:
    """A built-in category, or a user-defined one made with :meth:`custom`."""

    tag: str
    is_custom: bool = False

    EMAIL: ClassVar[Category]
    NAME: ClassVar[Category]
    PHONE: ClassVar[Category]
    CREDIT_CARD: ClassVar[Category]
    SSN: ClassVar[Category]
    IPV4: ClassVar[Category]
    IPV6: ClassVar[Category]
    MAC_ADDRESS: ClassVar[Category]
    HOSTNAME: ClassVar[Category]
    CONTAINER_ID: ClassVar[Category]
    UUID: ClassVar[Category]
    JWT: ClassVar[Category]
    AUTH_TOKEN: ClassVar[Category]
    FILE_PATH: ClassVar[Category]
    WINDOWS_SID: ClassVar[Category]
    URL: ClassVar[Category]
    AWS_ARN: ClassVar[Category]
    AZURE_RESOURCE_ID: ClassVar[Category]

    def __post_init__(self) -> None:
        if not self.is_custom and self.tag not in _BUILTIN_TAGS:
            raise ValueError(f"unknown built-in category: {self.tag!r}")

    @classmethod
    def custom(cls, name: str) -> Category:
        """Return a user-defined category called ``name``."""
        return cls(name, True)

    def as_str(self) -> str:
        """The canonical name of the category."""
        return self.tag

    def domain_tag_hmac(self) -> str:
        """A key for HMAC domain separation that cannot collide across kinds."""
        return f"custom:{self.tag}" if self.is_custom else self.tag

    def __str__(self) -> str:
        return self.domain_tag_hmac()


for _tag in _BUILTIN_TAGS:
    setattr(Category, _tag.upper(), Category(_tag))
del _tag