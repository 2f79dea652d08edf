from __future__ import annotations

from ipaddress import IPv4Address, IPv6Address

from pydantic import BaseModel, Field

from tunnelsettings.enums import DnsState


class DefaultDnsOptions(BaseModel):
    block_ads: bool = False
    block_trackers: bool = False
    block_malware: bool = False
    block_adult_content: bool = False
    block_gambling: bool = False


class CustomDnsOptions(BaseModel):
    addresses: list[IPv4Address | IPv6Address] = Field(default_factory=list)


class DnsOptions(BaseModel):
    state: DnsState = DnsState.DEFAULT
    default_options: DefaultDnsOptions = Field(default_factory=DefaultDnsOptions)
    custom_options: CustomDnsOptions = Field(default_factory=CustomDnsOptions)
